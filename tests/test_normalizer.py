import pytest

from decklimit.services.normalizer import card_id, matches_search, search_key


class TestCardId:
    def test_drops_spaces_and_punctuation(self) -> None:
        assert card_id("Jace, the Mind Sculptor") == "jacethemindsculptor"

    def test_keeps_digits(self) -> None:
        assert card_id("Mox Pearl (2ED)") == "moxpearl2ed"

    def test_formatting_noise_collapses(self) -> None:
        assert card_id("lightning   bolt") == card_id("LIGHTNING-BOLT")

    @pytest.mark.parametrize("text", ["Lightning Bolt", "Æther Vial", "  Fire // Ice  ", ""])
    def test_idempotent(self, text: str) -> None:
        assert card_id(card_id(text)) == card_id(text)


class TestSearchKey:
    def test_word_boundaries_become_placeholders(self) -> None:
        assert search_key("Lightning Bolt") == "lightning-bolt"

    def test_case_insensitive(self) -> None:
        assert search_key("ISLAND") == search_key("Island") == "island"

    def test_dollar_sign_is_dropped(self) -> None:
        assert search_key("$20.00") == "20-00"

    def test_runs_are_not_collapsed(self) -> None:
        assert search_key("a  b") == "a--b"

    @pytest.mark.parametrize("text", ["Mono-Red $20", "Jace, the Mind Sculptor", ""])
    def test_idempotent(self, text: str) -> None:
        assert search_key(search_key(text)) == search_key(text)


class TestMatchesSearch:
    def test_any_term_matches(self) -> None:
        assert matches_search("bob-Mono Red-$20.00", ["zzz", "mono"])

    def test_formatting_differences_are_ignored(self) -> None:
        assert matches_search("bob-Mono Red-$20.00", ["Mono-Red"])
        assert matches_search("bob-Mono Red-$20.00", ["$20"])

    def test_no_term_matches(self) -> None:
        assert not matches_search("bob-Mono Red-$20.00", ["blue"])

    def test_empty_term_matches_everything(self) -> None:
        assert matches_search("anything", [""])
