# waygeo/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from waygeo.app.protocols import WayStore
from waygeo.assembly.hooks import AssemblyHooks, NoopHooks
from waygeo.assembly.sequences import AssembledPolygon, AssembledPolyline
from waygeo.assembly.walker import WayWalker
from waygeo.config.models import WaygeoModel
from waygeo.domain.entities.topology import RelationId, VertexRef
from waygeo.io.assembly_logging import AssemblyLogging  # JSON logs
from waygeo.runtime.registries import GeometryAlgorithms, algorithms_for


@dataclass
class App:
    model: WaygeoModel
    store: WayStore
    hooks: AssemblyHooks
    algorithms: GeometryAlgorithms

    def walker(self, relation_id: RelationId) -> WayWalker:
        return WayWalker.over(
            self.store,
            relation_id,
            hooks=self.hooks,
            max_vertices=self.model.assembly.max_vertices,
        )

    def polygon(self, relation_id: RelationId, anchor: VertexRef | None = None) -> AssembledPolygon:
        return AssembledPolygon(self.walker(relation_id), anchor)

    def polyline(
        self, relation_id: RelationId, anchor: VertexRef | None = None
    ) -> AssembledPolyline:
        return AssembledPolyline(self.walker(relation_id), anchor)


def build(cfg: WaygeoModel | Mapping, store: WayStore, *, use_logging: bool = True) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, WaygeoModel) else WaygeoModel.model_validate(cfg)

    if not isinstance(store, WayStore):
        raise TypeError(f"{type(store).__name__} does not implement WayStore")

    # 1) Hooks
    hooks = (
        AssemblyLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )

    # 2) Math for the store's coordinate system
    algorithms = algorithms_for(store.crs)

    return App(model, store, hooks, algorithms)
