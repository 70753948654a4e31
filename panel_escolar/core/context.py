"""
Contextos compartidos entre componentes.

Un EntityContext solo puede leerse dentro de su provider y un provider
solo puede montarse dentro del provider de su contexto padre. Cualquier
violación es un error de integración y falla de inmediato.
"""

from contextlib import ExitStack, contextmanager
from contextvars import ContextVar
from typing import Dict, Generic, Iterator, Optional, TypeVar

from panel_escolar.core.cascade import CascadeCoordinator, CascadeStage
from panel_escolar.core.errors import ContextNotProvidedError

T = TypeVar("T")

_MISSING = object()


class EntityContext(Generic[T]):
    def __init__(self, name: str, parent: Optional["EntityContext"] = None):
        self.name = name
        self.parent = parent
        self._var: ContextVar = ContextVar(f"panel_{name}", default=_MISSING)

    @property
    def provider_name(self) -> str:
        return f"{self.name}Provider"

    def is_active(self) -> bool:
        return self._var.get() is not _MISSING

    @contextmanager
    def provide(self, value: T) -> Iterator[T]:
        if self.parent is not None and not self.parent.is_active():
            raise ContextNotProvidedError(
                f"{self.provider_name} debe montarse dentro de {self.parent.provider_name}"
            )
        token = self._var.set(value)
        try:
            yield value
        finally:
            self._var.reset(token)

    def use(self) -> T:
        value = self._var.get()
        if value is _MISSING:
            raise ContextNotProvidedError(
                f"use{self.name} debe usarse dentro de {self.provider_name}"
            )
        return value


SchoolCycleContext: EntityContext[CascadeStage] = EntityContext("SchoolCycle")
GradeContext: EntityContext[CascadeStage] = EntityContext("Grade", parent=SchoolCycleContext)
SectionContext: EntityContext[CascadeStage] = EntityContext("Section", parent=GradeContext)
CourseContext: EntityContext[CascadeStage] = EntityContext("Course", parent=SectionContext)
TeacherContext: EntityContext[CascadeStage] = EntityContext("Teacher", parent=CourseContext)

CASCADE_CONTEXTS: Dict[str, EntityContext[CascadeStage]] = {
    "cycle": SchoolCycleContext,
    "grade": GradeContext,
    "section": SectionContext,
    "course": CourseContext,
    "teacher": TeacherContext,
}


@contextmanager
def provide_cascade(coordinator: CascadeCoordinator) -> Iterator[CascadeCoordinator]:
    """Montar los contextos de la cascada en el orden de dependencia"""
    with ExitStack() as stack:
        for name in coordinator.stage_names:
            context = CASCADE_CONTEXTS.get(name)
            if context is None:
                continue
            stack.enter_context(context.provide(coordinator.stage(name)))
        yield coordinator
