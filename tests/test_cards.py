"""Tests for kuhn_cfr/engine/cards.py — card constants, action encoding, and string I/O."""

from __future__ import annotations

import pytest

from kuhn_cfr.engine.cards import (
    ACTION_CODES,
    ACTIONS,
    CARD_NAMES,
    DECK,
    NUM_ACTIONS,
    Action,
    card_to_str,
    decode_action,
    history_to_str,
    str_to_card,
    str_to_history,
)


class TestDeckConstants:
    def test_three_cards(self):
        assert DECK == (1, 2, 3)

    def test_card_names(self):
        assert CARD_NAMES == {1: 'J', 2: 'Q', 3: 'K'}

    def test_ranks_strictly_ordered(self):
        """Jack < Queen < King; no ties are possible."""
        assert sorted(DECK) == list(DECK)
        assert len(set(DECK)) == len(DECK)


class TestActionEncoding:
    def test_two_actions(self):
        assert NUM_ACTIONS == 2
        assert ACTIONS == (Action.CHECK, Action.BET)

    def test_action_indices(self):
        assert int(Action.CHECK) == 0
        assert int(Action.BET) == 1

    def test_actions_index_arrays(self):
        """IntEnum members index directly into per-node arrays."""
        values = [10.0, 20.0]
        assert values[Action.CHECK] == 10.0
        assert values[Action.BET] == 20.0

    def test_action_codes(self):
        assert ACTION_CODES[Action.CHECK] == 'c'
        assert ACTION_CODES[Action.BET] == 'b'


class TestDecodeAction:
    @pytest.mark.parametrize("index,expected", [(0, Action.CHECK), (1, Action.BET)])
    def test_valid_indices(self, index, expected):
        assert decode_action(index) is expected

    @pytest.mark.parametrize("index", [-1, 2, 7])
    def test_invalid_index_raises(self, index):
        with pytest.raises(ValueError, match="Unknown action index"):
            decode_action(index)

    def test_accepts_enum_member(self):
        assert decode_action(Action.BET) is Action.BET


class TestCardStrings:
    @pytest.mark.parametrize("card,name", [(1, 'J'), (2, 'Q'), (3, 'K')])
    def test_card_to_str(self, card, name):
        assert card_to_str(card) == name

    @pytest.mark.parametrize("name,card", [('J', 1), ('q', 2), (' K ', 3)])
    def test_str_to_card(self, name, card):
        assert str_to_card(name) == card

    def test_roundtrip_all_cards(self):
        for card in DECK:
            assert str_to_card(card_to_str(card)) == card

    def test_card_to_str_rejects_unknown(self):
        with pytest.raises(ValueError):
            card_to_str(4)

    def test_str_to_card_rejects_unknown(self):
        with pytest.raises(ValueError):
            str_to_card('A')


class TestHistoryStrings:
    def test_empty_history(self):
        assert history_to_str(()) == ''
        assert str_to_history('') == ()

    def test_check_bet(self):
        assert history_to_str((Action.CHECK, Action.BET)) == 'cb'

    def test_parse_is_case_insensitive(self):
        assert str_to_history('CBb') == (Action.CHECK, Action.BET, Action.BET)

    def test_unknown_code_raises(self):
        with pytest.raises(ValueError, match="Unknown action code"):
            str_to_history('cx')
