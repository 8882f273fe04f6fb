from persona.profile import PersonaProfile
from persona.text_cleanup import clean_generated_text, shorten_reply

PROFILE = PersonaProfile()


def test_instruction_heading_removes_everything_after_it() -> None:
    raw = "Tch. Fix it.\nCORE THORFINN TRAITS:\n1. Almost never talks\n- cold"
    assert clean_generated_text(raw, PROFILE) == "Tch. Fix it."


def test_trailing_marker_is_removed_on_last_line() -> None:
    assert clean_generated_text("Not interested. Remember: stay in character", PROFILE) == "Not interested."


def test_shouted_labels_bullets_and_stage_directions_are_removed() -> None:
    raw = "THORFINN: hello\n- a bullet\n• another\n*glares silently* Pointless.\n\n\nNo."
    assert clean_generated_text(raw, PROFILE) == "Pointless.\nNo."


def test_clean_text_is_left_alone() -> None:
    assert clean_generated_text("  Adequate.  ", PROFILE) == "Adequate."


def test_long_reply_is_cut_to_first_sentence() -> None:
    text = "This code is weak and it will collapse the moment anyone touches it. Rebuild it from scratch now."
    assert shorten_reply(text, 15) == "This code is weak and it will collapse the moment anyone touches it."


def test_long_reply_without_period_gets_one() -> None:
    text = " ".join(["word"] * 16)
    assert shorten_reply(text, 15) == text + "."


def test_short_reply_is_unchanged() -> None:
    assert shorten_reply("Don't talk. Fix it", 15) == "Don't talk. Fix it"
