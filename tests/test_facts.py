from memory.facts import extract_user_facts


def test_name_follows_my_name_is() -> None:
    assert extract_user_facts("my name is Alex") == {"name": "Alex"}


def test_name_is_case_insensitive_and_drops_punctuation() -> None:
    assert extract_user_facts("Hi. My name is Alex.")["name"] == "Alex"


def test_age_requires_both_phrases() -> None:
    assert extract_user_facts("I am 30 years old") == {"age": "30"}
    assert "age" not in extract_user_facts("I am 30")
    assert "age" not in extract_user_facts("my cat is 3 years old")


def test_age_takes_first_digit_run() -> None:
    assert extract_user_facts("In 2024 I am 31 years old")["age"] == "2024"


def test_location_stops_at_sentence_punctuation() -> None:
    assert extract_user_facts("I live in Tokyo.") == {"location": "Tokyo"}
    assert extract_user_facts("i am from New York, but moved")["location"] == "New York"


def test_empty_location_is_ignored() -> None:
    assert extract_user_facts("I live in.") == {}


def test_multiple_facts_in_one_message() -> None:
    facts = extract_user_facts("My name is Sam and I live in Oslo! I am 25 years old")
    assert facts == {"name": "Sam", "location": "Oslo", "age": "25"}


def test_no_facts() -> None:
    assert extract_user_facts("fix my code") == {}
    assert extract_user_facts("") == {}
