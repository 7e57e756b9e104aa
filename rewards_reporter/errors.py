class ConfigurationError(Exception):
    """Raise if the config holds invalid or contradictory values, such as a window ending before it starts"""

    pass


class UnknownEventError(Exception):
    """Raise if an event type is not recognized. Aborts the whole run"""

    pass


class MalformedEventError(Exception):
    """Raise if a recognized event carries a payload that fails validation"""

    pass


class InvalidTransferError(Exception):
    """
    Raise if a transfer would drive a balance negative.
    Indicates a gap or an ordering defect in the supplied event logs.
    """

    pass


class EmptyDistributionError(Exception):
    """Raise if there are no rewards to build a merkle tree from"""

    pass


class VerificationMismatchError(Exception):
    """Raise if a computed merkle root does not match the externally supplied one"""

    pass


class MissingEnvironmentVariableException(Exception):
    pass
