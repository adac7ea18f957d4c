"""
Built-in question sets.

core15:
    15 weighted statements. Communication, conflict resolution and trust
    carry the highest weights.

extended54:
    54 statements in six categories. The last two categories (items 31-54)
    describe harmful patterns and are declared NEGATIVE here, at the
    definition boundary.
"""

from typing import Dict, List, Tuple

from .schema import Category, Polarity, Question, QuestionSet


# =============================================================================
# core15
# =============================================================================

CORE15_CATEGORIES = (
    Category("communication", "Communication & Trust",
             "How you talk, decide and resolve disagreements"),
    Category("connection", "Support & Connection",
             "Your emotional bond and shared experiences"),
    Category("practical", "Practical Life",
             "Money, family plans and everyday responsibilities"),
)

# (text, category, weight)
CORE15_ITEMS: List[Tuple[str, str, float]] = [
    ("We communicate openly and honestly with each other", "communication", 1.0),
    ("We resolve conflicts in a healthy, constructive manner", "communication", 0.9),
    ("We trust each other completely", "communication", 0.9),
    ("We share similar values and life goals", "communication", 0.8),
    ("We make important decisions together", "communication", 0.8),
    ("We support each other's personal growth", "connection", 0.7),
    ("We regularly spend quality time together", "connection", 0.7),
    ("We show appreciation and gratitude for each other", "connection", 0.6),
    ("We maintain a healthy physical intimacy", "connection", 0.6),
    ("We respect each other's individuality and space", "connection", 0.6),
    ("We handle financial matters cooperatively", "practical", 0.5),
    ("We have similar expectations about family life", "practical", 0.5),
    ("We can laugh and have fun together", "connection", 0.4),
    ("We support each other during difficult times", "connection", 0.7),
    ("We are satisfied with our division of household responsibilities", "practical", 0.4),
]


# =============================================================================
# extended54
# =============================================================================

EXTENDED54_CATEGORIES = (
    Category("communication", "Communication & Conflict Resolution",
             "How you communicate and resolve disagreements"),
    Category("connection", "Emotional Connection & Quality Time",
             "Your emotional bond and shared experiences"),
    Category("values", "Shared Values & Life Goals",
             "Alignment in values, dreams, and expectations"),
    Category("understanding", "Mutual Understanding & Knowledge",
             "How well you know and understand each other"),
    Category("challenges", "Communication Challenges",
             "Patterns that may hinder healthy communication", critical=True),
    Category("safety", "Conflict & Emotional Safety",
             "How you handle conflicts and emotional situations", critical=True),
)

EXTENDED54_WEIGHTS: Dict[str, float] = {
    "communication": 0.9,
    "connection": 0.7,
    "values": 0.6,
    "understanding": 0.5,
    "challenges": 0.85,
    "safety": 0.95,
}

EXTENDED54_NEGATIVE = {"challenges", "safety"}

EXTENDED54_ITEMS: List[Tuple[str, str]] = [
    # communication (1-5)
    ("When one of us apologizes during an argument, the argument ends", "communication"),
    ("We can set our differences aside when things get hard", "communication"),
    ("When needed, we can restart a discussion and correct its course", "communication"),
    ("Reaching out to my partner during a disagreement eventually works", "communication"),
    ("We listen to each other without interrupting", "communication"),
    # connection (6-10)
    ("The time we spend together is special to us", "connection"),
    ("We make time at home to be partners, not just housemates", "connection"),
    ("We enjoy traveling or going out together", "connection"),
    ("Most of our goals are shared", "connection"),
    ("We feel emotionally close to each other", "connection"),
    # values (11-20)
    ("We have similar ideas about how a marriage should be", "values"),
    ("We agree on how roles should be shared in our relationship", "values"),
    ("Our values about trust are similar", "values"),
    ("We have compatible ideas about freedom within the relationship", "values"),
    ("We have similar ways of having fun", "values"),
    ("We share similar views about raising children", "values"),
    ("Our dreams for the future are compatible", "values"),
    ("We agree about what makes someone a good partner", "values"),
    ("We have similar attitudes toward spending and saving", "values"),
    ("We see eye to eye on the role of family and friends", "values"),
    # understanding (21-30)
    ("I know my partner's friends and their social circle", "understanding"),
    ("I know what my partner is currently worried about", "understanding"),
    ("I know my partner's hopes and wishes", "understanding"),
    ("I know my partner very well", "understanding"),
    ("I know my partner's favorite foods", "understanding"),
    ("I know how my partner wants to be cared for when sick", "understanding"),
    ("I know what stresses my partner is facing in their life", "understanding"),
    ("I know my partner's basic anxieties", "understanding"),
    ("I know what my partner considers a good day", "understanding"),
    ("I know my partner's inner world", "understanding"),
    # challenges (31-40), negative
    ("Our discussions quickly turn into arguments", "challenges"),
    ("I can be humiliating when we argue", "challenges"),
    ("My statements during arguments can be insulting", "challenges"),
    ("I bring up my partner's personal flaws during discussions", "challenges"),
    ("I am sarcastic toward my partner during disagreements", "challenges"),
    ("I can use negative statements about my partner's personality", "challenges"),
    ("I can be offensive when we argue", "challenges"),
    ("I am not afraid to point out my partner's inadequacy", "challenges"),
    ("Small issues between us often escalate", "challenges"),
    ("We talk past each other instead of to each other", "challenges"),
    # safety (41-54), negative
    ("We start arguing before I even know what is going on", "safety"),
    ("I get angry suddenly during discussions", "safety"),
    ("I stay silent for long periods to avoid conflict", "safety"),
    ("I leave the house to get away from an argument", "safety"),
    ("I would rather stay silent than calm the environment", "safety"),
    ("Even when I'm right, I stay silent to hurt my partner", "safety"),
    ("When we argue, I remain silent because I'm afraid of losing control", "safety"),
    ("I feel right in our discussions", "safety"),
    ("I have nothing to do with what I've been accused of", "safety"),
    ("I'm not actually the one who is at fault", "safety"),
    ("I'm not the one who is wrong about problems at home", "safety"),
    ("I wouldn't hesitate to tell my partner about their inadequacy", "safety"),
    ("When we discuss, I remind my partner of their inadequacy", "safety"),
    ("I don't feel emotionally safe bringing up problems", "safety"),
]


def _build_core15() -> QuestionSet:
    questions = [
        Question(index=i, text=text, category=category, weight=weight)
        for i, (text, category, weight) in enumerate(CORE15_ITEMS)
    ]
    return QuestionSet("core15", tuple(questions), CORE15_CATEGORIES)


def _build_extended54() -> QuestionSet:
    questions = []
    for i, (text, category) in enumerate(EXTENDED54_ITEMS):
        polarity = Polarity.NEGATIVE if category in EXTENDED54_NEGATIVE else Polarity.POSITIVE
        questions.append(Question(
            index=i,
            text=text,
            category=category,
            polarity=polarity,
            weight=EXTENDED54_WEIGHTS[category],
        ))
    return QuestionSet("extended54", tuple(questions), EXTENDED54_CATEGORIES)


QUESTION_SETS = {
    "core15": _build_core15,
    "extended54": _build_extended54,
}


def get_question_set(name: str) -> QuestionSet:
    """
    Look up a built-in question set by name.

    Raises:
        ValueError: If the name is unknown
    """
    try:
        builder = QUESTION_SETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown question set: {name} (available: {', '.join(QUESTION_SETS)})"
        ) from None
    return builder()
