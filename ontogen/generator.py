"""Generator — the single pass from OntologyModel to generated sources.

  OntologyModel
    -> build_class_models      (names, types, collision checks)
    -> InterfaceEmitter        <class>.py          per shape
    -> WrapperEmitter          <class>_wrapper.py  per shape
    -> InstanceDslEmitter      <dsl_name>_dsl.py   once
    -> package __init__.py     (+ shapes.ttl when requested)

The model is never mutated, and the output depends only on the model and the
options: generating twice yields identical files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from . import codemodel as cm
from .builder_model import ClassBuilderModel, build_class_models
from .errors import OutputWriteError
from .instance_dsl import InstanceDslEmitter
from .interface_emitter import InterfaceEmitter
from .naming import dsl_module_name_of
from .options import GenerationOptions
from .resolver import TypeResolver
from .shacl_bridge import model_to_shacl
from .types import OntologyModel
from .validation_emitter import ValidationEmitter
from .wrapper_emitter import WrapperEmitter

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Generated sources keyed by file name relative to the package directory."""
    package_name: str
    files: dict[str, str] = field(default_factory=dict)
    classes: list[ClassBuilderModel] = field(default_factory=list)

    @property
    def package_path(self) -> Path:
        return Path(*self.package_name.split("."))

    def summary(self) -> str:
        lines = [f"Generated package {self.package_name}", "-" * 50]
        lines.append(f"  Classes ({len(self.classes)}):")
        for model in self.classes:
            lines.append(f"    - {model.class_name} <{model.class_iri}> ({len(model.properties)} properties)")
        lines.append(f"  Files ({len(self.files)}):")
        for file_name in sorted(self.files):
            lines.append(f"    - {file_name}")
        return "\n".join(lines)


def generate(model: OntologyModel, options: GenerationOptions | None = None) -> GenerationResult:
    """Generate interfaces, wrappers and the instance DSL for ``model``."""
    options = options or GenerationOptions()
    resolver = TypeResolver(model, options)
    classes = build_class_models(model, options, resolver)
    logger.info("Generating %d classes from %d shapes", len(classes), len(model.shapes))

    validation = ValidationEmitter(options.validation)
    result = GenerationResult(package_name=options.package_name, classes=classes)

    if options.generate_interfaces:
        interfaces = InterfaceEmitter(options)
        for cbm in classes:
            result.files[f"{cbm.module_name}.py"] = interfaces.emit(cbm)
    if options.generate_wrappers:
        wrappers = WrapperEmitter(options, validation)
        for cbm in classes:
            result.files[f"{cbm.wrapper_module_name}.py"] = wrappers.emit(cbm)
    if options.generate_dsl:
        dsl = InstanceDslEmitter(options, validation)
        result.files[f"{dsl_module_name_of(options.dsl_name)}.py"] = dsl.emit(classes)

    result.files["__init__.py"] = emit_package_init(classes, options)

    if options.output.emit_shapes_graph:
        result.files["shapes.ttl"] = model_to_shacl(model).serialize(format="turtle")

    for file_name in sorted(result.files):
        logger.debug("Generated %s", file_name)
    return result


def emit_package_init(classes: list[ClassBuilderModel], options: GenerationOptions) -> str:
    """``__init__.py`` importing interfaces, wrappers (registration) and the DSL."""
    body: list[cm.Stmt] = []
    exported: list[str] = []

    if options.generate_interfaces:
        for cbm in classes:
            body.append(cm.import_from(cbm.module_name, [cbm.class_name], level=1))
            exported.append(cbm.class_name)
    if options.generate_wrappers:
        for cbm in classes:
            body.append(cm.import_from(cbm.wrapper_module_name, [cbm.wrapper_name], level=1))
            exported.append(cbm.wrapper_name)
    if options.generate_dsl:
        dsl = InstanceDslEmitter(options)
        names = [dsl.dsl_class_name, options.dsl_name] + [c.builder_class_name for c in classes]
        body.append(cm.import_from(dsl_module_name_of(options.dsl_name), sorted(names), level=1))
        exported.extend(names)

    body.append(cm.assign("__all__", cm.list_of(cm.const(n) for n in sorted(exported))))
    doc = None
    if options.output.include_docstrings:
        doc = f"Generated package {options.package_name}; importing it registers every wrapper."
    return cm.render(cm.module(body, doc=doc), header=["GENERATED FILE - DO NOT EDIT"])


def write(result: GenerationResult, out_dir: str | Path) -> list[Path]:
    """Write ``result`` under ``out_dir``, creating the package directory."""
    package_dir = Path(out_dir) / result.package_path
    written = []
    try:
        package_dir.mkdir(parents=True, exist_ok=True)
        for file_name in sorted(result.files):
            path = package_dir / file_name
            path.write_text(result.files[file_name], encoding="utf-8")
            written.append(path)
    except OSError as exc:
        raise OutputWriteError(f"Cannot write generated package: {exc}", {"path": str(package_dir)}) from exc
    logger.info("Wrote %d files to %s", len(written), package_dir)
    return written
