import pytest

from studyhub.dispatcher import parse_ai_command


@pytest.mark.parametrize(
    "text, question",
    [
        ("/ai what is 2+2", "what is 2+2"),
        ("/AI Explain recursion", "Explain recursion"),
        ("/ai    padded question   ", "padded question"),
        ("/ai first line\nsecond line", "first line"),
        ("/ai\nnext line question", "next line question"),
    ],
)
def test_matches_leading_command(text, question):
    assert parse_ai_command(text) == question


@pytest.mark.parametrize(
    "text",
    ["/ai   ", "/ai", "/aiwhat", "hello /ai test", " /ai test", "", None, 42],
)
def test_other_text_is_not_a_command(text):
    assert parse_ai_command(text) is None
