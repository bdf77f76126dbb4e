import pytest


class ScriptedPrompts:
    """Replays prepared answers in place of interactive rich prompts."""

    def __init__(self, answers=None, confirms=None):
        self.answers = list(answers or [])
        self.confirms = list(confirms or [])
        self.asked = []
        self.pauses = []

    def ask(self, text, default="", password=False):
        self.asked.append((text, password))
        answer = self.answers.pop(0) if self.answers else ""
        return answer or default

    def confirm(self, text, default=False):
        self.asked.append((text, False))
        return self.confirms.pop(0) if self.confirms else default

    def pause(self, text):
        self.pauses.append(text)


@pytest.fixture
def scripted_prompts():
    return ScriptedPrompts
