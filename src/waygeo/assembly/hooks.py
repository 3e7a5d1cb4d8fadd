# assembly/hooks.py
from typing import Protocol


class AssemblyHooks(Protocol):
    def segment_entered(self, *, relation_id, segment, entry, direction): ...
    def connector_resolved(self, *, relation_id, boundary, target, direction): ...
    def vertex_emitted(self, *, relation_id, vertex, emitted): ...
    def closed(self, *, relation_id, origin, emitted, segments): ...
    def exhausted(self, *, relation_id, origin, emitted, segments): ...
    def error(self, *, relation_id, reason: str, **kw): ...


class NoopHooks:
    def segment_entered(self, **_):
        pass

    def connector_resolved(self, **_):
        pass

    def vertex_emitted(self, **_):
        pass

    def closed(self, **_):
        pass

    def exhausted(self, **_):
        pass

    def error(self, **_):
        pass
