from __future__ import annotations

import random
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Set

from .agents.basic import BasicStrategyAgent
from .cards import Shoe
from .errors import IllegalActionError, InvalidConfigurationError
from .hand import Hand
from .players import Dealer, Player
from .rules import GameRules
from .settings import GameSettings, to_decimal
from .state import Cursor, next_phase, next_turn
from .types import SETTLED_STATUSES, Action, GamePhase, HandResult, HandStatus, HandView, Observation


class Table:
    """One dealer, up to seven seats and a shoe, driven phase by phase.

    `advance_phase()` moves the round forward one step; turn and insurance
    commands act on whoever the round is waiting for. AI seats are played by
    their agent as soon as their turn comes up, so the table only ever stops
    on a human decision. Every event is passed as a dict to `log_fn`.
    """

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        shoe: Optional[Shoe] = None,
        log_fn: Optional[Callable[[Dict[str, Any]], None]] = None,
        save_bankroll: Optional[Callable[[Decimal], None]] = None,
    ):
        self.settings = settings or GameSettings()
        self.rules = GameRules(self.settings)
        self.shoe = shoe if shoe is not None else Shoe(self.settings.num_decks, seed=seed, rng=rng)
        self.shoe.subscribe(self._on_shuffle)
        self.dealer = Dealer(self.settings.dealer_hits_soft_17)
        self.players: List[Player] = []
        self.agents: Dict[int, Any] = {}
        self.phase = GamePhase.BETTING
        self.round_number = 1
        self.cursor: Optional[Cursor] = None
        self.shuffles = 0
        self.log_fn = log_fn
        self.save_bankroll = save_bankroll
        self._pending_insurance: Set[int] = set()
        self._insurance: Dict[int, Decimal] = {}
        self._results: List[HandResult] = []
        self._trace: List[Dict[str, Any]] = []

    # Seating and bets

    def add_player(self, player: Player, agent: Any = None) -> Player:
        if self.phase is not GamePhase.BETTING:
            raise IllegalActionError("Players can only sit down between rounds")
        if any(p.seat == player.seat for p in self.players):
            raise InvalidConfigurationError(f"Seat {player.seat} is already taken")
        self.players.append(player)
        self.players.sort(key=lambda p: p.seat)
        if not player.is_human:
            self.agents[player.seat] = agent if agent is not None else BasicStrategyAgent()
        return player

    def seat_player(self, name: str, seat: int, is_human: bool = False, bankroll: Any = None, agent: Any = None) -> Player:
        if bankroll is None:
            bankroll = self.settings.starting_bankroll
        return self.add_player(Player(name, seat, bankroll, is_human=is_human), agent=agent)

    def player_at(self, seat: int) -> Player:
        for p in self.players:
            if p.seat == seat:
                return p
        raise IllegalActionError(f"No player in seat {seat}")

    def place_bet(self, seat: int, amount: Any) -> None:
        if self.phase is not GamePhase.BETTING:
            raise IllegalActionError(f"Bets are closed during {self.phase.name}")
        player = self.player_at(seat)
        if not player.is_active:
            raise IllegalActionError(f"{player.name} is no longer playing")
        amount = to_decimal(amount)
        if amount <= 0:
            raise InvalidConfigurationError("Bet must be positive")
        if not self.rules.is_valid_bet(amount):
            raise IllegalActionError(
                f"Bet must be between {self.rules.minimum_bet} and {self.rules.maximum_bet}"
            )
        player.place_bet(amount)

    # Queries

    @property
    def participants(self) -> List[Player]:
        return [p for p in self.players if p.in_round]

    @property
    def active_player(self) -> Optional[Player]:
        if self.cursor is None:
            return None
        return self.players[self.cursor.player_index]

    @property
    def active_hand(self) -> Optional[Hand]:
        if self.cursor is None:
            return None
        return self.players[self.cursor.player_index].hands[self.cursor.hand_index]

    @property
    def pending_insurance(self) -> List[int]:
        return sorted(self._pending_insurance)

    @property
    def results(self) -> List[HandResult]:
        return list(self._results)

    @property
    def trace(self) -> List[Dict[str, Any]]:
        return list(self._trace)

    @property
    def awaiting_input(self) -> bool:
        if self.phase is GamePhase.PLAYER_ACTIONS:
            return self.cursor is not None
        if self.phase is GamePhase.INSURANCE_OFFER:
            return bool(self._pending_insurance)
        return False

    def allowed_actions(self) -> List[Action]:
        hand, player = self.active_hand, self.active_player
        if hand is None or player is None or self.phase is not GamePhase.PLAYER_ACTIONS:
            return []
        allowed: List[Action] = []
        if self.rules.can_stand(hand):
            allowed.append(Action.STAND)
        if self.rules.can_hit(hand):
            allowed.append(Action.HIT)
        if self.rules.can_double_down(hand, player):
            allowed.append(Action.DOUBLE)
        if self.rules.can_split(hand, player):
            allowed.append(Action.SPLIT)
        return allowed

    def observation(self) -> Observation:
        hand, player = self._require_turn()
        allowed = self.allowed_actions()
        hv = HandView(
            cards=hand.labels(),
            total=hand.total,
            is_soft=hand.is_soft,
            is_pair=hand.is_pair,
            pair_value=hand.pair_value,
            can_split=Action.SPLIT in allowed,
            can_double=Action.DOUBLE in allowed,
        )
        return Observation(
            player=hv,
            dealer_upcard=self.dealer.up_card.label(),
            seat=player.seat,
            hand_index=self.cursor.hand_index,
            num_hands=len(player.hands),
            allowed_actions=allowed,
            bankroll=player.bankroll,
        )

    def summary(self) -> Dict[str, Any]:
        return {
            "round": self.round_number,
            "phase": self.phase.name,
            "dealer": self.dealer.visible_cards(),
            "players": [
                {
                    "name": p.name,
                    "seat": p.seat,
                    "bankroll": str(p.bankroll),
                    "is_human": p.is_human,
                    "is_active": p.is_active,
                    "hands": [
                        {"cards": h.labels(), "total": h.total, "bet": str(h.bet), "status": h.status.name}
                        for h in p.hands
                        if h.cards
                    ],
                }
                for p in self.players
            ],
            "results": [r.to_dict() for r in self._results],
            "cards_remaining": self.shoe.cards_remaining,
        }

    # Round flow

    def advance_phase(self) -> GamePhase:
        current = self.phase
        self._check_complete(current)
        self._leave(current)
        nxt = next_phase(
            current,
            dealer_peeks=self.dealer.shows_ace or self.dealer.shows_ten,
            dealer_needed=self._dealer_needed(),
            needs_reshuffle=self.shoe.needs_reshuffle,
        )
        self.phase = nxt
        self._emit("phase", previous=current.name)
        self._enter(nxt)
        return self.phase

    def auto_advance(self) -> GamePhase:
        """Advance until a human has to decide or the next round's betting opens."""
        self.advance_phase()
        while self.phase is not GamePhase.BETTING and not self.awaiting_input:
            self.advance_phase()
        return self.phase

    def _check_complete(self, phase: GamePhase) -> None:
        if phase is GamePhase.BETTING and not self.participants:
            raise IllegalActionError("No bets have been placed")
        if phase is GamePhase.PLAYER_ACTIONS and self.cursor is not None:
            raise IllegalActionError(f"Seat {self.active_player.seat} still has a hand to play")

    def _dealer_needed(self) -> bool:
        return any(h.status is HandStatus.STANDING for p in self.participants for h in p.hands)

    def _leave(self, phase: GamePhase) -> None:
        if phase is GamePhase.INSURANCE_OFFER:
            for seat in sorted(self._pending_insurance):
                self._emit("insurance", seat=seat, decision="declined", auto=True)
            self._pending_insurance.clear()
            self._dealer_peek()
        elif phase is GamePhase.SETTLEMENT:
            self._end_round()

    def _enter(self, phase: GamePhase) -> None:
        if phase is GamePhase.DEALING:
            self._deal()
        elif phase is GamePhase.INSURANCE_OFFER:
            self._offer_insurance()
        elif phase is GamePhase.PLAYER_ACTIONS:
            self._start_turns()
        elif phase is GamePhase.DEALER_ACTION:
            self.dealer.reveal_hole_card()
            drawn = self.rules.play_dealer(self.dealer, self.shoe)
            self._emit(
                "dealer_play",
                drawn=[c.label() for c in drawn],
                cards=self.dealer.hand.labels(),
                total=self.dealer.hand.total,
                busted=self.dealer.hand.is_busted,
            )
        elif phase is GamePhase.SETTLEMENT:
            self._settle()
        elif phase is GamePhase.SHUFFLING:
            self.shoe.shuffle()

    def _deal(self) -> None:
        self._results = []
        self._trace = []
        players = self.participants
        for p in players:
            p.hands[0].add_card(self.shoe.draw())
        self.dealer.add_card(self.shoe.draw())
        for p in players:
            p.hands[0].add_card(self.shoe.draw())
        self.dealer.add_card(self.shoe.draw())
        self._emit(
            "deal",
            dealer=self.dealer.visible_cards(),
            seats={p.seat: p.hands[0].labels() for p in players},
        )

    def _offer_insurance(self) -> None:
        if not self.dealer.shows_ace:
            # ten up: the dealer peeks but sells nothing
            return
        for p in self.participants:
            hand = p.hands[0]
            offered = self.rules.can_offer_even_money(hand, self.dealer) or self.rules.can_offer_insurance(
                self.dealer, p, hand
            )
            if not offered:
                continue
            if p.is_human:
                self._pending_insurance.add(p.seat)
            else:
                self._emit("insurance", seat=p.seat, decision="declined", auto=True)
        self._emit("insurance_offer", seats=sorted(self._pending_insurance))

    def _dealer_peek(self) -> None:
        if not self.dealer.has_blackjack:
            for seat, stake in self._insurance.items():
                self._emit("insurance", seat=seat, decision="lost", stake=str(stake))
            return
        self.dealer.reveal_hole_card()
        self._emit("dealer_blackjack", cards=self.dealer.hand.labels())
        for p in self.participants:
            hand = p.hands[0]
            if hand.status in SETTLED_STATUSES:
                continue  # even money already paid
            stake = self._insurance.get(p.seat)
            payout = self.rules.settle_hand(
                hand, self.dealer, insurance_taken=stake is not None, insurance_bet=stake or 0
            )
            self._record(p, 0, hand, payout)

    def _start_turns(self) -> None:
        if not (self.dealer.hole_card_revealed and self.dealer.has_blackjack):
            for p in self.participants:
                hand = p.hands[0]
                if hand.is_blackjack and hand.status is HandStatus.ACTIVE:
                    hand.status = HandStatus.BLACKJACK
                    self._record(p, 0, hand, self.rules.calculate_blackjack_payout(hand.bet))
        self.cursor = next_turn(self.players)
        self._enter_turn()
        self._play_agents()

    def _settle(self) -> None:
        self.dealer.reveal_hole_card()
        for p in self.participants:
            for i, hand in enumerate(p.hands):
                if hand.status in (HandStatus.STANDING, HandStatus.BUSTED):
                    self._record(p, i, hand, self.rules.settle_hand(hand, self.dealer))
        for p in self.participants:
            if p.is_human and self.save_bankroll is not None:
                self.save_bankroll(p.bankroll)
        self._emit(
            "round_settled",
            dealer=self.dealer.hand.labels(),
            dealer_total=self.dealer.hand.total,
            results=[r.to_dict() for r in self._results],
        )

    def _end_round(self) -> None:
        for p in self.players:
            p.clear_hands()
            if p.is_active and p.bankroll < self.settings.table_minimum:
                p.is_active = False
                reason = "bankrupt" if p.is_bankrupt else "below_minimum"
                self._emit("player_inactive", seat=p.seat, bankroll=str(p.bankroll), reason=reason)
        self.dealer.clear_hand()
        self.cursor = None
        self._insurance.clear()
        self._pending_insurance.clear()
        self.round_number += 1

    def _record(self, player: Player, hand_index: int, hand: Hand, payout: Decimal) -> None:
        player.add_winnings(payout)
        wagered = hand.bet
        if hand_index == 0:
            wagered += self._insurance.get(player.seat, Decimal("0"))
        result = HandResult(
            seat=player.seat,
            hand_index=hand_index,
            cards=hand.labels(),
            bet=wagered,
            payout=payout,
            status=hand.status,
        )
        self._results.append(result)
        self._emit("hand_settled", **result.to_dict())

    # Insurance decisions

    def _require_insurance_seat(self, seat: int) -> Player:
        if self.phase is not GamePhase.INSURANCE_OFFER:
            raise IllegalActionError(f"Insurance is not offered during {self.phase.name}")
        player = self.player_at(seat)
        if seat not in self._pending_insurance:
            raise IllegalActionError(f"Seat {seat} has no insurance decision to make")
        return player

    def take_insurance(self, seat: int) -> Decimal:
        player = self._require_insurance_seat(seat)
        stake = self.rules.take_insurance(player, player.hands[0], self.dealer)
        self._insurance[seat] = stake
        self._pending_insurance.discard(seat)
        self._emit("insurance", seat=seat, decision="taken", stake=str(stake))
        return stake

    def accept_even_money(self, seat: int) -> Decimal:
        player = self._require_insurance_seat(seat)
        hand = player.hands[0]
        if not self.rules.can_offer_even_money(hand, self.dealer):
            raise IllegalActionError("Even money is only offered on a blackjack")
        payout = self.rules.accept_even_money(hand)
        self._pending_insurance.discard(seat)
        self._emit("insurance", seat=seat, decision="even_money")
        self._record(player, 0, hand, payout)
        return payout

    def decline_insurance(self, seat: int) -> None:
        self._require_insurance_seat(seat)
        self._pending_insurance.discard(seat)
        self._emit("insurance", seat=seat, decision="declined", auto=False)

    # Turn commands

    def hit(self) -> None:
        self._command(Action.HIT)

    def stand(self) -> None:
        self._command(Action.STAND)

    def double_down(self) -> None:
        self._command(Action.DOUBLE)

    def split(self) -> None:
        self._command(Action.SPLIT)

    def act(self, action: Action) -> None:
        self._command(action)

    def _command(self, action: Action) -> None:
        self._apply(action)
        self._play_agents()

    def _require_turn(self):
        if self.phase is not GamePhase.PLAYER_ACTIONS or self.cursor is None:
            raise IllegalActionError("No hand is waiting for a decision")
        return self.active_hand, self.active_player

    def _apply(self, action: Action, meta: Optional[Dict[str, Any]] = None) -> None:
        hand, player = self._require_turn()
        obs = self.observation()
        if action is Action.HIT:
            self.rules.hit(hand, self.shoe)
        elif action is Action.STAND:
            self.rules.stand(hand)
        elif action is Action.DOUBLE:
            self.rules.double_down(hand, player, self.shoe)
        elif action is Action.SPLIT:
            self.rules.execute_split(hand, player, self.shoe)
        else:
            raise IllegalActionError(f"Unknown action {action!r}")
        decision = {
            "round": self.round_number,
            "seat": player.seat,
            "hand_index": obs.hand_index,
            "obs": obs.to_dict(),
            "action": action.name,
            "meta": meta or {},
        }
        self._trace.append(decision)
        self._emit("decision", **{k: v for k, v in decision.items() if k != "round"})
        if self.active_hand.status is not HandStatus.ACTIVE:
            self.cursor = next_turn(self.players, self.cursor)
            self._enter_turn()

    def _enter_turn(self) -> None:
        while self.cursor is not None:
            hand = self.active_hand
            if hand.needs_second_card:
                hand.add_card(self.shoe.draw())
            if hand.status is HandStatus.ACTIVE:
                self._emit("turn", seat=self.active_player.seat, hand_index=self.cursor.hand_index, cards=hand.labels())
                return
            self.cursor = next_turn(self.players, self.cursor)

    def _play_agents(self) -> None:
        while self.phase is GamePhase.PLAYER_ACTIONS and self.cursor is not None:
            player = self.active_player
            if player.is_human:
                return
            meta: Dict[str, Any] = {}
            action = self.agents[player.seat].act(self.observation(), info=meta)
            self._apply(action, meta)

    # Events

    def _on_shuffle(self, shoe: Shoe) -> None:
        self.shuffles += 1
        self._emit("shuffle", cards=shoe.cards_remaining)

    def _emit(self, event: str, **data: Any) -> None:
        if self.log_fn is None:
            return
        self.log_fn({"event": event, "round": self.round_number, "phase": self.phase.name, **data})
