"""
Keyword Heuristic Classifier

Deterministic classifier that scans lower-cased solution code for keywords.
It is fast and offline but shallow: a variable named ``tree`` is enough to
tag a problem "Binary Tree". Use LLMClassifier when accuracy matters.

Detection rules (first column is the tag, second the concept recorded):

    Topics
        Linked List      listnode | linked
        Binary Tree      treenode | tree
        Graph            graph | adjacency
        Stack            stack | (push & pop)
        Queue            queue | deque
        Heap             heap | priority

    Patterns
        Dynamic Programming    dp | memo | (for & range & +)
        Two Pointers           left & right & (while | for)
        Sliding Window         sliding | (window & left & right)
        Depth-First Search     dfs | recursion | (def & return)
        Breadth-First Search   bfs | (queue & level)
        Binary Search          "binary search" | (mid & left & right)
        Backtracking           backtrack | (recursion & remove)
        Greedy                 greedy | (sort & max)

Usage:
    from algo_revise.services.classification import KeywordClassifier

    result = KeywordClassifier().classify(solution_code)
    print(result.topics, result.patterns, result.difficulty)
"""

from collections.abc import Callable

from algo_revise.enums.revision import ClassifierSource, Difficulty
from algo_revise.models.classification import ClassificationResult

Matcher = Callable[[str], bool]

# (tag, concept, matcher) evaluated against lower-cased code
TOPIC_RULES: tuple[tuple[str, str, Matcher], ...] = (
    ("Linked List", "Linked List Traversal", lambda c: "listnode" in c or "linked" in c),
    ("Binary Tree", "Tree Traversal", lambda c: "treenode" in c or "tree" in c),
    ("Graph", "Graph Traversal", lambda c: "graph" in c or "adjacency" in c),
    ("Stack", "Stack Operations", lambda c: "stack" in c or ("push" in c and "pop" in c)),
    ("Queue", "Queue Operations", lambda c: "queue" in c or "deque" in c),
    ("Heap", "Heap Operations", lambda c: "heap" in c or "priority" in c),
)

PATTERN_RULES: tuple[tuple[str, str, Matcher], ...] = (
    (
        "Dynamic Programming",
        "Memoization",
        lambda c: "dp" in c or "memo" in c or ("for" in c and "range" in c and "+" in c),
    ),
    (
        "Two Pointers",
        "Two Pointer Technique",
        lambda c: "left" in c and "right" in c and ("while" in c or "for" in c),
    ),
    (
        "Sliding Window",
        "Sliding Window Technique",
        lambda c: "sliding" in c or ("window" in c and "left" in c and "right" in c),
    ),
    (
        "Depth-First Search",
        "Recursion",
        lambda c: "dfs" in c or "recursion" in c or ("def" in c and "return" in c),
    ),
    (
        "Breadth-First Search",
        "Level-order Traversal",
        lambda c: "bfs" in c or ("queue" in c and "level" in c),
    ),
    (
        "Binary Search",
        "Binary Search",
        lambda c: "binary search" in c or ("mid" in c and "left" in c and "right" in c),
    ),
    (
        "Backtracking",
        "Backtracking",
        lambda c: "backtrack" in c or ("recursion" in c and "remove" in c),
    ),
    (
        "Greedy",
        "Greedy Algorithm",
        lambda c: "greedy" in c or ("sort" in c and "max" in c),
    ),
)

# Difficulty points per detected tag
DIFFICULTY_WEIGHTS = {
    "Dynamic Programming": 3,
    "Backtracking": 3,
    "Graph": 2,
    "Binary Tree": 2,
    "Two Pointers": 1,
    "Sliding Window": 1,
}

DEFAULT_TOPICS = ["Array"]
DEFAULT_PATTERNS = ["Iteration"]
DEFAULT_CONCEPTS = ["Basic Programming"]


def _has_nested_loops(code: str) -> bool:
    # Two "for" occurrences, so a single loop stays O(n)
    return code.count("for") >= 2


def estimate_time_complexity(code: str) -> str:
    if _has_nested_loops(code):
        return "O(n²)"
    if "sort" in code:
        return "O(n log n)"
    if "binary search" in code or "log" in code:
        return "O(log n)"
    return "O(n)"


def estimate_space_complexity(code: str) -> str:
    if any(keyword in code for keyword in ("recursion", "stack", "queue", "dp")):
        return "O(n)"
    return "O(1)"


def suggest_optimizations(code: str) -> list[str]:
    suggestions = []
    if _has_nested_loops(code) and "dp" not in code:
        suggestions.append("Consider using a hash map to reduce time complexity")
    if "sort" in code and "binary search" not in code:
        suggestions.append(
            "Consider if sorting is necessary or if a different approach exists"
        )
    if "recursion" in code and "memo" not in code:
        suggestions.append("Consider memoization to avoid redundant calculations")
    return suggestions


def estimate_difficulty(code: str, tags: list[str]) -> Difficulty:
    """
    Score detected tags and code size into a difficulty label.

    Args:
        code: Original (not lower-cased) solution code
        tags: Detected topics and patterns

    Returns:
        HARD at 4+ points, MEDIUM at 2+, otherwise EASY
    """
    score = sum(DIFFICULTY_WEIGHTS.get(tag, 0) for tag in set(tags))

    lines = len(code.split("\n"))
    if lines > 50:
        score += 2
    elif lines > 25:
        score += 1

    if "recursion" in code and "for" in code:
        score += 1

    if score >= 4:
        return Difficulty.HARD
    if score >= 2:
        return Difficulty.MEDIUM
    return Difficulty.EASY


class KeywordClassifier:
    """Keyword-matching ProblemClassifier."""

    def classify(self, code: str) -> ClassificationResult:
        lowered = code.lower()
        topics: list[str] = []
        patterns: list[str] = []
        concepts: list[str] = []

        for tag, concept, matches in TOPIC_RULES:
            if matches(lowered):
                topics.append(tag)
                concepts.append(concept)

        for tag, concept, matches in PATTERN_RULES:
            if matches(lowered):
                patterns.append(tag)
                concepts.append(concept)

        return ClassificationResult(
            difficulty=estimate_difficulty(code, topics + patterns),
            topics=topics or list(DEFAULT_TOPICS),
            patterns=patterns or list(DEFAULT_PATTERNS),
            time_complexity=estimate_time_complexity(lowered),
            space_complexity=estimate_space_complexity(lowered),
            optimization_suggestions=suggest_optimizations(lowered),
            concepts_used=concepts or list(DEFAULT_CONCEPTS),
            source=ClassifierSource.KEYWORD,
        )

    async def aclassify(self, code: str) -> ClassificationResult:
        """Same as classify; the heuristic never blocks on I/O."""
        return self.classify(code)
