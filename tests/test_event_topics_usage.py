import re
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1] / "event_bridge"

LITERAL_COMMANDS = {
    "plugin:event|listen",
    "plugin:event|unlisten",
    "plugin:event|emit",
}


def test_no_literal_commands_outside_topics_module():
    union = "|".join(map(re.escape, LITERAL_COMMANDS))
    pattern = re.compile(rf"[\'\"](?:{union})[\'\"]")
    offenders = []
    for path in ROOT.rglob("*.py"):
        if path.as_posix().endswith("core/event_topics.py"):
            continue
        text = path.read_text(encoding="utf-8")
        for m in pattern.finditer(text):
            line = text[:m.start()].splitlines()[-1]
            if line.strip().startswith("#"):
                continue
            offenders.append((path, m.group(0)))
    assert not offenders, f"Found literal command names in code: {offenders}"
