# waygeo/domain/errors.py


class WaygeoError(Exception):
    """Base class for every error raised by waygeo."""


class DegenerateGeometryError(WaygeoError, ValueError):
    """Numeric-degenerate input: zero vector, antipodal centroid, coincident arc ends."""


class TraversalError(WaygeoError, RuntimeError):
    """Cursor misuse: stepping past the end, or start points that are not adjacent."""


class MalformedTopologyError(WaygeoError):
    """
    The stored ways do not describe a usable ring or chain.
    Recoverable by the caller (e.g. skip that relation).
    """


class AmbiguousConnectorError(MalformedTopologyError):
    def __init__(self, boundary, relation_id, targets):
        self.boundary, self.relation_id, self.targets = boundary, relation_id, list(targets)
        super().__init__(
            f"{len(self.targets)} connectors at {boundary!r} match relation {relation_id!r}: "
            f"{self.targets!r}"
        )


class RelationNotFoundError(WaygeoError, LookupError):
    def __init__(self, relation_id):
        self.relation_id = relation_id
        super().__init__(f"no anchor found for relation {relation_id!r}")
