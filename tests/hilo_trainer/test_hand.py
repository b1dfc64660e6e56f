"""Tests for Hand evaluation and settlement."""

import pytest
from hypothesis import given, strategies as st

from hilo_trainer.cards import Card, Rank, Suit
from hilo_trainer.game.results import Outcome, RoundResult, HandResult, settle_hand
from hilo_trainer.hand import Hand, best_score, display_score, hard_low_value

from conftest import make_hand

cards_strategy = st.lists(
    st.builds(Card, st.sampled_from(list(Rank)), st.sampled_from(list(Suit))),
    min_size=1,
    max_size=8,
)


class TestHand:
    """Tests for the Hand class."""

    def test_empty_hand(self, empty_hand):
        """Test empty hand properties."""
        assert len(empty_hand) == 0
        assert empty_hand.value == 0
        assert empty_hand.display_value == "0"
        assert not empty_hand.is_soft
        assert not empty_hand.is_blackjack
        assert not empty_hand.is_busted

    def test_hard_hand_value(self, hard_16_hand):
        """Test hard hand value calculation."""
        assert hard_16_hand.value == 16
        assert not hard_16_hand.is_soft

    def test_soft_hand_value(self, soft_17_hand):
        """Test soft hand value calculation."""
        assert soft_17_hand.value == 17
        assert soft_17_hand.hard_value == 7
        assert soft_17_hand.is_soft

    def test_blackjack(self, blackjack_hand):
        """Test blackjack detection."""
        assert blackjack_hand.is_blackjack
        assert blackjack_hand.value == 21

    def test_split_twenty_one_is_not_blackjack(self):
        """Test a two-card 21 after a split is not a natural."""
        hand = make_hand("AS", "KH")
        hand.is_split_hand = True
        assert hand.value == 21
        assert not hand.is_blackjack

    def test_not_blackjack_three_cards(self):
        """Test that 21 with 3+ cards is not blackjack."""
        hand = make_hand("7S", "7H", "7C")
        assert hand.value == 21
        assert not hand.is_blackjack

    def test_bust(self, bust_hand):
        """Test bust detection."""
        assert bust_hand.is_busted
        assert bust_hand.value == 26

    def test_soft_to_hard_transition(self):
        """Test ace switching from 11 to 1."""
        hand = make_hand("AS")
        assert hand.value == 11

        hand.add_card(Card(Rank.FIVE, Suit.HEARTS))
        assert hand.value == 16
        assert hand.is_soft

        hand.add_card(Card(Rank.EIGHT, Suit.CLUBS))
        assert hand.value == 14
        assert not hand.is_soft

    def test_multiple_aces(self):
        """Test hand with multiple aces."""
        hand = make_hand("AS", "AH")
        assert hand.value == 12
        assert hand.is_soft

        hand.add_card(Card(Rank.ACE, Suit.CLUBS))
        assert hand.value == 13

        hand.add_card(Card(Rank.NINE, Suit.DIAMONDS))
        assert hand.value == 12
        assert not hand.is_soft

    def test_pair_detection(self, pair_8s_hand):
        """Test pair detection."""
        assert pair_8s_hand.is_pair
        assert pair_8s_hand.value == 16

    def test_mixed_tens_are_not_a_pair(self):
        """Test ten-valued cards of different ranks do not pair."""
        assert not make_hand("JS", "KH").is_pair
        assert make_hand("10S", "10H").is_pair

    def test_not_pair_three_cards(self):
        """Test that 3 cards is not a pair."""
        assert not make_hand("8S", "8H", "2C").is_pair


class TestScoring:
    """Tests for the scoring functions."""

    def test_hard_low_value_counts_aces_as_one(self):
        """Test every Ace counts 1 and faces 10."""
        cards = make_hand("AS", "AH", "KD").cards
        assert hard_low_value(cards) == 12

    @pytest.mark.parametrize(
        "codes, expected",
        [
            (("10S", "7H"), "17"),
            (("AS", "6H"), "7 / 17"),
            (("AS", "KH"), "11 / 21"),
            (("AS", "6H", "9D"), "16"),
            (("AS", "AH"), "2 / 12"),
        ],
    )
    def test_display_score(self, codes, expected):
        """Test low/high display for hands with Aces."""
        assert display_score(make_hand(*codes).cards) == expected

    @given(cards_strategy)
    def test_best_score_never_busts_when_avoidable(self, cards):
        """Test the best score is at most 21 whenever the low total is."""
        if hard_low_value(cards) <= 21:
            assert best_score(cards) <= 21
        else:
            assert best_score(cards) == hard_low_value(cards)

    @given(cards_strategy)
    def test_best_score_is_low_or_low_plus_ten(self, cards):
        """Test at most one Ace is ever counted high."""
        low = hard_low_value(cards)
        assert best_score(cards) in (low, low + 10)

    @given(cards_strategy)
    def test_display_agrees_with_best_score(self, cards):
        """Test the single displayed total is the best score."""
        shown = display_score(cards)
        if "/" in shown:
            assert int(shown.split(" / ")[1]) == best_score(cards)
        else:
            assert int(shown) == best_score(cards)


class TestSettlement:
    """Tests for hand settlement."""

    def test_player_bust_forfeits(self):
        """Test a busted hand loses even when the dealer busts."""
        outcome, payout = settle_hand(make_hand("10S", "6H", "KC", bet=10), 24)
        assert outcome == Outcome.BUST
        assert payout == 0

    def test_dealer_bust_pays_double(self):
        """Test a standing hand wins 2x when the dealer busts."""
        assert settle_hand(make_hand("10S", "2H", bet=10), 22) == (Outcome.WIN, 20)

    def test_higher_score_wins(self):
        """Test a higher total wins 2x."""
        assert settle_hand(make_hand("10S", "9H", bet=10), 18) == (Outcome.WIN, 20)

    def test_lower_score_loses(self):
        """Test a lower total loses the stake."""
        assert settle_hand(make_hand("10S", "7H", bet=10), 21) == (Outcome.LOSE, 0)

    def test_push_returns_stake(self):
        """Test equal totals return the stake."""
        assert settle_hand(make_hand("10S", "8H", bet=10), 18) == (Outcome.PUSH, 10)

    def test_natural_pays_like_any_win(self):
        """Test a natural is paid 2x, not 3:2."""
        assert settle_hand(make_hand("AS", "KH", bet=10), 20) == (Outcome.WIN, 20)

    @given(cards_strategy, st.integers(min_value=17, max_value=26), st.integers(1, 500))
    def test_payout_is_zero_bet_or_double(self, cards, dealer_score, bet):
        """Test every payout is 0, the bet or twice the bet."""
        outcome, payout = settle_hand(Hand(cards=cards, bet=bet), dealer_score)
        assert outcome in set(Outcome)
        assert payout in (0, bet, 2 * bet)

    def test_round_summary(self):
        """Test the round summary line."""
        hands = [
            HandResult(0, "Hero 1", Outcome.WIN, 20, 18, 10, 20),
            HandResult(1, "Hero 2", Outcome.BUST, 23, 18, 10, 0),
        ]
        result = RoundResult(starting_balance=200, balance=200, dealer_score=18, hands=hands)
        assert result.net_change == 0
        assert result.summary == "Hero 1: Win | Hero 2: Bust [200+0]"

    def test_round_summary_single_loss(self):
        """Test a single losing hand summary."""
        hands = [HandResult(0, "Hero", Outcome.LOSE, 17, 21, 10, 0)]
        result = RoundResult(starting_balance=200, balance=190, dealer_score=21, hands=hands)
        assert result.summary == "Lose [200-10]"
