import shutil

from haus.decision.fallback import build_unavailable_decision
from haus.decision.judge import ModerationEngine
from haus.decision.risk_level import summarize_risk_level
from haus.explainability.reasons import describe_reasons

# --- AUDIT-STYLE UI THEME ---
class Colors:
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    HEADER = '\033[1m'
    MUTED = '\033[90m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'

VERDICT_COLORS = {
    "APPROVED": Colors.OKGREEN,
    "PENDING_REVIEW": Colors.WARNING,
    "FLAGGED": Colors.WARNING,
    "REJECTED": Colors.FAIL,
}

SCENARIOS = [
    ("Clean post", {"toxicity": 0.1, "hateSpeech": 0.1, "violence": 0.1, "sexualContent": 0.1}),
    ("Mild shade", {"toxicity": 0.35, "hateSpeech": 0, "violence": 0, "sexualContent": 0}),
    ("Borderline hate", {"toxicity": 0, "hateSpeech": 0.55, "violence": 0, "sexualContent": 0}),
    ("Hate speech", {"toxicity": 0, "hateSpeech": 0.75, "violence": 0, "sexualContent": 0}),
    ("Everything high", {"toxicity": 0.9, "hateSpeech": 0.9, "violence": 0.9, "sexualContent": 0.9}),
    ("Broken upstream", {"toxicity": 1.5, "hateSpeech": -0.2}),
]


def print_separator(char="-"):
    width = shutil.get_terminal_size().columns
    print(Colors.MUTED + (char * width) + Colors.ENDC)


def print_kv(key, value, color=Colors.BOLD):
    print(f"{key:<20} : {color}{value}{Colors.ENDC}")


def print_decision(title, decision, risk_level="-"):
    print_separator("=")
    print(f"  {Colors.HEADER}{title.upper()}{Colors.ENDC}")
    print_separator("=")
    color = VERDICT_COLORS[decision.verdict.value]
    print_kv("Verdict", decision.verdict.value, color)
    print_kv("Risk Level", risk_level)
    print_kv("Reasons", ", ".join(decision.reasons) or "-")
    print_kv("Author Message", "; ".join(describe_reasons(decision.reasons)) or "-")


def run_demo():
    engine = ModerationEngine()

    for title, scores in SCENARIOS:
        decision = engine.decide(scores)
        print_decision(title, decision, summarize_risk_level(scores).value)

    # Classifier unreachable: the table is never consulted
    print_decision("Classifier outage", build_unavailable_decision())
    print("\n")


if __name__ == "__main__":
    run_demo()
