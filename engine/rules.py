"""Table rules and limits."""

from dataclasses import dataclass

# Hard ceiling on any configured bet limit
TABLE_BET_LIMIT = 50


@dataclass(frozen=True)
class TableRules:
    """
    Table configuration.

    Thresholds that decide outcomes, betting limits, and the safety caps
    that bound the draw loops.
    """

    # Bankroll a run starts (and restarts) with
    starting_bankroll: int = 10000

    # Betting limits
    max_bet: int = 50
    cta_bet: int = 10  # Bet placed by BET_PLACE_CTA when none is set

    # Scoring thresholds
    bust_threshold: float = 21.0  # Strictly above is a bust
    dealer_stand: float = 17.0  # Dealer draws while below

    # Safety valves
    dealer_draw_cap: int = 50
    draw_retry_limit: int = 500

    # Audit trail
    log_capacity: int = 200

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if not 1 <= self.max_bet <= TABLE_BET_LIMIT:
            raise ValueError(f"max_bet must be between 1 and {TABLE_BET_LIMIT}")
        if not 1 <= self.cta_bet <= self.max_bet:
            raise ValueError("cta_bet must be between 1 and max_bet")
        if self.starting_bankroll < 0:
            raise ValueError("starting_bankroll cannot be negative")
        if self.dealer_draw_cap < 1 or self.draw_retry_limit < 1:
            raise ValueError("safety caps must be at least 1")
        if self.log_capacity < 1:
            raise ValueError("log_capacity must be at least 1")

    def clamp_bet(self, amount: int) -> int:
        """Clamp a bet into [0, max_bet]."""
        return max(0, min(amount, self.max_bet))

    def is_bust(self, total: float) -> bool:
        """Check if a hand total is a bust."""
        return total > self.bust_threshold
