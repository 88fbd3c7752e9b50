import pytest

from futbolai.errors import InvalidInputError
from futbolai.query_classifier import IntentKind, classify, confidence_level, strip_trailing_query_words


def test_bare_country_is_national_team_high():
    intent = classify("Brazil")
    assert intent.kind is IntentKind.TEAM
    assert intent.confidence_level == "high"
    assert intent.params["team_type"] == "national"
    assert intent.entity == "brazil"


def test_proper_name_is_player_medium():
    intent = classify("Kylian Mbappé")
    assert intent.kind is IntentKind.PLAYER
    assert intent.confidence_level == "medium"
    assert intent.normalized_text == "kylian mbappe"


def test_classify_is_deterministic():
    first = classify("Real Madrid squad", language="es")
    second = classify("Real Madrid squad", language="es")
    assert first == second
    assert first.kind is IntentKind.TEAM
    assert first.params["matched"] == "Real Madrid"
    assert first.params["entity"] == "real madrid"


def test_known_surname_is_player_high():
    intent = classify("messi")
    assert intent.kind is IntentKind.PLAYER
    assert intent.confidence_level == "high"


def test_match_vocabulary_extracts_competition_and_status():
    intent = classify("la liga results")
    assert intent.kind is IntentKind.MATCHES
    assert intent.params["competition"] == "PD"
    assert intent.params["status"] == "FINISHED"

    upcoming = classify("premier league fixtures")
    assert upcoming.params["competition"] == "PL"
    assert upcoming.params["status"] == "SCHEDULED"


def test_competition_name_alone_is_not_a_player():
    intent = classify("Premier League")
    assert intent.kind is IntentKind.KEYWORD


def test_unknown_text_falls_back_to_keyword_low():
    intent = classify("offside rule history")
    assert intent.kind is IntentKind.KEYWORD
    assert intent.confidence_level == "low"


def test_forced_kind_wins():
    intent = classify("Brazil", forced_kind="translation", language="fr")
    assert intent.kind is IntentKind.TRANSLATION
    assert intent.confidence == 1.0
    assert intent.params["term"] == "Brazil"
    assert intent.language == "fr"


@pytest.mark.parametrize("raw", ["", "   ", None, 42])
def test_empty_or_non_string_query_rejected(raw):
    with pytest.raises(InvalidInputError) as excinfo:
        classify(raw)
    assert excinfo.value.to_dict()["kind"] == "invalid_input"


def test_unknown_forced_kind_rejected():
    with pytest.raises(InvalidInputError):
        classify("Brazil", forced_kind="video")


def test_params_are_read_only():
    intent = classify("Brazil")
    with pytest.raises(TypeError):
        intent.params["team_type"] = "club"


def test_trailing_words_and_levels():
    assert strip_trailing_query_words("brazil national team") == "brazil"
    assert strip_trailing_query_words("team") == "team"
    assert confidence_level(0.85) == "high"
    assert confidence_level(0.5) == "medium"
    assert confidence_level(0.49) == "low"


@pytest.mark.parametrize(
    "raw, matched",
    [
        ("Inter Miami", "Inter Miami"),
        ("Inter Milan", "Inter Milan"),
        ("inter", "Inter Milan"),
        ("Atletico Mineiro", "Atletico Mineiro"),
        ("atletico", "Atletico Madrid"),
        ("AC Milan squad", "AC Milan"),
    ],
)
def test_short_club_aliases_only_match_whole_query(raw, matched):
    intent = classify(raw)
    assert intent.kind is IntentKind.TEAM
    assert intent.params["matched"] == matched


def test_short_alias_inside_other_name_is_not_a_major_club():
    intent = classify("Roma Sporting Club")
    assert intent.params.get("matched") is None


def test_transfer_vocabulary_is_transfers_intent():
    intent = classify("Arsenal transfers")
    assert intent.kind is IntentKind.TRANSFERS
    assert intent.params["subject"] == "arsenal"
    assert intent.confidence_level == "medium"

    assert classify("transfers").params["subject"] is None


def test_forced_image_keeps_the_name_as_typed():
    intent = classify("  Kylian   Mbappé ", forced_kind="image")
    assert intent.kind is IntentKind.IMAGE
    assert intent.params["name"] == "Kylian Mbappé"
    assert intent.normalized_text == "kylian mbappe"
