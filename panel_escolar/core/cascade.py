"""
Selección en cascada Ciclo -> Grado -> Sección -> Curso -> Docente.

Cada etapa recibe su etapa padre al construirse; sus opciones se cargan
con el valor del padre (más la selección completa de los ancestros).
Elegir un valor en una etapa limpia todas las etapas siguientes y carga
las opciones de la inmediata siguiente. Elegir el mismo valor no hace nada.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from panel_escolar.core.fetcher import EntityFetcher, FetchState, list_fetcher
from panel_escolar.core.logger import get_logger

logger = get_logger(__name__)

STAGES: Tuple[str, ...] = ("cycle", "grade", "section", "course", "teacher")

STAGE_LABELS = {
    "cycle": "ciclos escolares",
    "grade": "grados",
    "section": "secciones",
    "course": "cursos",
    "teacher": "docentes",
}

# loader(parent_value, ancestors) -> opciones; la raíz se llama sin argumentos
StageLoader = Callable[..., List[Any]]


def option_id(option: Any) -> Any:
    if isinstance(option, dict):
        return option.get("id")
    return getattr(option, "id", option)


@dataclass(frozen=True)
class CascadeSelection:
    cycle_id: Optional[int] = None
    grade_id: Optional[int] = None
    section_id: Optional[int] = None
    course_id: Optional[int] = None
    teacher_id: Optional[int] = None

    def value_of(self, stage: str) -> Optional[int]:
        return getattr(self, f"{stage}_id")

    def as_dict(self) -> Dict[str, Optional[int]]:
        return {f"{stage}Id": self.value_of(stage) for stage in STAGES}


class CascadeStage:
    """Una etapa de la cascada: valor elegido + fetcher de opciones"""

    def __init__(
        self,
        name: str,
        loader: StageLoader,
        parent: Optional["CascadeStage"] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        if parent is not None and parent.child is not None:
            raise ValueError(f"La etapa {parent.name} ya tiene una etapa hija")
        self.name = name
        self.parent = parent
        self.child: Optional["CascadeStage"] = None
        self.value: Optional[Any] = None
        self._loader = loader
        self.fetcher: EntityFetcher = list_fetcher(
            self._load,
            name=STAGE_LABELS.get(name, name),
            requires_scope=parent is not None,
            executor=executor,
        )
        if parent is not None:
            parent.child = self

    def _load(self, *args, ancestors: Optional[Dict[str, Any]] = None):
        if self.parent is None:
            return self._loader()
        return self._loader(args[0], ancestors or {})

    def ancestors(self) -> Dict[str, Any]:
        values = {}
        stage = self.parent
        while stage is not None:
            values[stage.name] = stage.value
            stage = stage.parent
        return values

    def descendants(self) -> List["CascadeStage"]:
        stages = []
        stage = self.child
        while stage is not None:
            stages.append(stage)
            stage = stage.child
        return stages

    @property
    def options(self) -> Tuple[Any, ...]:
        return tuple(self.fetcher.data or ())

    @property
    def state(self) -> FetchState:
        return self.fetcher.state

    @property
    def options_loaded(self) -> bool:
        """Las opciones visibles corresponden al valor actual del padre"""
        state = self.fetcher.state
        if state.is_loading or state.error:
            return False
        if self.parent is None:
            return self.fetcher.generation > 0
        return self.parent.value is not None and state.scope == self.parent.value

    def has_option(self, value: Any) -> bool:
        return any(option_id(o) == value for o in self.options)

    def clear(self):
        """Limpiar valor y opciones sin tocar la red"""
        self.value = None
        self.fetcher.reset()

    def reload(self, background: bool = False):
        if self.parent is None:
            if background:
                return self.fetcher.load_in_background()
            return self.fetcher.load()
        ancestors = self.ancestors()
        if background:
            return self.fetcher.load_in_background(self.parent.value, ancestors=ancestors)
        return self.fetcher.load(self.parent.value, ancestors=ancestors)


class CascadeCoordinator:
    """
    Dueño único de la cadena de selección.

    Si se pasa un executor, las cargas de opciones corren en segundo plano y
    los setters devuelven el Future de la carga disparada.
    """

    def __init__(
        self,
        root: CascadeStage,
        auto_select_single: bool = False,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        if root.parent is not None:
            raise ValueError("La etapa raíz no puede tener padre")
        self.root = root
        self.auto_select_single = auto_select_single
        self.executor = executor
        self._lock = threading.RLock()
        self._observers: List[Callable[[CascadeSelection], None]] = []
        self._stages: Dict[str, CascadeStage] = {}
        for stage in [root] + root.descendants():
            self._stages[stage.name] = stage

    @classmethod
    def build(
        cls,
        loaders: Dict[str, StageLoader],
        stages: Tuple[str, ...] = STAGES,
        auto_select_single: bool = False,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> "CascadeCoordinator":
        """Armar la cadena en orden; cada etapa recibe explícitamente a su padre"""
        missing = [name for name in stages if name not in loaders]
        if missing:
            raise ValueError(f"Faltan loaders para: {', '.join(missing)}")
        parent = None
        root = None
        for name in stages:
            stage = CascadeStage(name, loaders[name], parent=parent, executor=executor)
            root = root or stage
            parent = stage
        return cls(root, auto_select_single=auto_select_single, executor=executor)

    # ------------------------------------------------------------------
    # Lectura
    # ------------------------------------------------------------------

    @property
    def stage_names(self) -> Tuple[str, ...]:
        return tuple(self._stages)

    def stage(self, name: str) -> CascadeStage:
        try:
            return self._stages[name]
        except KeyError:
            raise KeyError(f"Etapa desconocida: {name}")

    def options(self, name: str) -> Tuple[Any, ...]:
        return self.stage(name).options

    def value(self, name: str) -> Optional[Any]:
        return self.stage(name).value

    @property
    def selection(self) -> CascadeSelection:
        values = {
            f"{name}_id": stage.value
            for name, stage in self._stages.items()
            if name in STAGES
        }
        return CascadeSelection(**values)

    @property
    def is_complete(self) -> bool:
        return all(stage.value is not None for stage in self._stages.values())

    @property
    def is_loading(self) -> bool:
        return any(stage.fetcher.is_loading for stage in self._stages.values())

    @property
    def errors(self) -> Dict[str, str]:
        return {
            name: stage.fetcher.error
            for name, stage in self._stages.items()
            if stage.fetcher.error
        }

    # ------------------------------------------------------------------
    # Escritura
    # ------------------------------------------------------------------

    def subscribe(
        self, callback: Callable[[CascadeSelection], None]
    ) -> Callable[[], None]:
        """Observar cada cambio de selección; devuelve la función para darse de baja"""
        self._observers.append(callback)
        return lambda: self._observers.remove(callback)

    def _emit(self, selection: CascadeSelection):
        for callback in list(self._observers):
            callback(selection)

    def load_root(self):
        """Cargar las opciones de la primera etapa"""
        return self._reload(self.root)

    def _reload(self, stage: CascadeStage):
        if self.executor is not None:
            future = stage.reload(background=True)
            if self.auto_select_single:
                future.add_done_callback(lambda _f, s=stage: self._auto_select(s))
            return future
        state = stage.reload()
        self._auto_select(stage)
        return state

    def _auto_select(self, stage: CascadeStage):
        if not self.auto_select_single:
            return
        # La carga pudo quedar obsoleta mientras corría
        if not stage.options_loaded:
            return
        options = stage.options
        if len(options) == 1 and stage.value is None:
            logger.debug(f"Selección automática en {stage.name}: {option_id(options[0])}")
            self.select(stage.name, option_id(options[0]))

    def select(self, name: str, value: Optional[Any]):
        """
        Elegir un valor en la etapa `name`.

        - mismo valor: no hace nada (sin carga, sin limpiar);
        - etapa padre sin valor: ValueError, nada cambia;
        - None: limpia las etapas siguientes sin llamar a la red;
        - otro valor: limpia las etapas siguientes y carga la siguiente.
        """
        stage = self.stage(name)
        with self._lock:
            if value == stage.value:
                return None
            parent = stage.parent
            if value is not None and parent is not None and parent.value is None:
                raise ValueError(
                    f"No se puede elegir {name} sin antes elegir {parent.name}"
                )
            if (
                value is not None
                and stage.options_loaded
                and not stage.has_option(value)
            ):
                raise ValueError(f"{value!r} no es una opción válida para {name}")

            stage.value = value
            for descendant in stage.descendants():
                descendant.clear()
            selection = self.selection
            logger.debug(f"Cascada: {name}={value!r} -> {selection.as_dict()}")
            child = stage.child

        self._emit(selection)
        if value is None or child is None:
            return None
        return self._reload(child)

    def set_cycle(self, cycle_id: Optional[int]):
        return self.select("cycle", cycle_id)

    def set_grade(self, grade_id: Optional[int]):
        return self.select("grade", grade_id)

    def set_section(self, section_id: Optional[int]):
        return self.select("section", section_id)

    def set_course(self, course_id: Optional[int]):
        return self.select("course", course_id)

    def set_teacher(self, teacher_id: Optional[int]):
        return self.select("teacher", teacher_id)

    def reset(self):
        """Volver al estado inicial conservando las opciones de la raíz"""
        with self._lock:
            self.root.value = None
            for stage in self.root.descendants():
                stage.clear()
            selection = self.selection
        self._emit(selection)
