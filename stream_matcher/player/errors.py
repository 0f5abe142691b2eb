class PlayerError(RuntimeError):
    pass


class NoPlayersFound(PlayerError):
    pass


class PlayerUnavailable(PlayerError):
    """The player vanished or stopped answering mid-poll."""
