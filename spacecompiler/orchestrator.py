"""Pipeline orchestration for single-file, batch and project compilation."""

from __future__ import annotations

import io
import zipfile
from datetime import UTC, datetime
from pathlib import PurePosixPath
from typing import BinaryIO, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar

from .attention import AttentionEngine
from .config import CompilerConfig, default_config
from .context import CompilationContext
from .errors import CompilationCancelled, CompilationError, InputError, StageFailure
from .logging import get_logger, unit_logger
from .models import CompilationResult, ParsedResource
from .resolver import ProjectGraphResolver
from .serialization import graph_to_dict
from .stages import (
    BlockParser,
    DescriptorParser,
    KeywordAnalyzer,
    SemanticAnalyzer,
    SpaceProjParser,
    StructuralParser,
    TokenizerRegistry,
)

_T = TypeVar("_T")


class Orchestrator:
    """Drives tokenize, parse, analyze and attend for each public entry point.

    Failures inside a unit of work are recorded on the result and never raised.
    The attention pass runs once per call, after every unit has been analyzed.
    """

    def __init__(
        self,
        config: CompilerConfig | None = None,
        tokenizers: TokenizerRegistry | None = None,
        parser: StructuralParser | None = None,
        analyzer: SemanticAnalyzer | None = None,
        descriptor_parser: DescriptorParser | None = None,
        attention: AttentionEngine | None = None,
    ) -> None:
        self.config = config or default_config()
        self.tokenizers = tokenizers or TokenizerRegistry()
        self.parser = parser or BlockParser()
        self.analyzer = analyzer or KeywordAnalyzer()
        self.descriptor_parser = descriptor_parser or SpaceProjParser()
        self.attention = attention or AttentionEngine(self.config.attention)
        self.resolver = ProjectGraphResolver(self._compile_unit)
        self.logger = get_logger("orchestrator")

    def compile_file(
        self,
        content: str,
        file_name: str,
        content_type: str | None = None,
        *,
        context: CompilationContext | None = None,
    ) -> CompilationResult:
        """Compile one content blob and compute attention over its blocks."""
        context = self._new_context(context)
        content_type = content_type or self.config.content_type_for(file_name)
        result = CompilationResult(
            metadata={
                "compiled_at": _utc_now(),
                "file_name": file_name,
                "content_type": content_type,
            }
        )
        context.logger.info("Compiling file: %s", file_name)

        try:
            result.merge(self._compile_unit(content, file_name, context, content_type))
            if not result.resources:
                return result
            self._attend(result, context)
        except CompilationCancelled as exc:
            self._record_cancelled(result, exc, context)
        except Exception as exc:
            context.logger.debug("Unexpected failure compiling %s", file_name, exc_info=True)
            result.errors.append(f"Error compiling {file_name}: {exc}")
        else:
            if result.success:
                resource = result.resources[0]
                context.logger.info(
                    "Successfully compiled %s: %d blocks, %d fragments",
                    file_name,
                    len(resource.blocks),
                    sum(len(block.fragments) for block in resource.blocks),
                )
        return result

    def compile_files(
        self,
        files: Mapping[str, str],
        *,
        context: CompilationContext | None = None,
    ) -> CompilationResult:
        """Compile a batch of named blobs into one unified attention matrix."""
        context = self._new_context(context)
        result = CompilationResult(
            metadata={"compiled_at": _utc_now(), "file_count": len(files)}
        )
        context.logger.info("Compiling %d files as unified tree", len(files))

        try:
            for file_name, content in files.items():
                context.checkpoint(f"file {file_name}")
                result.merge(self._compile_unit(content, file_name, context))
            if result.resources:
                context.logger.info("Computing unified self-attention matrix for all files")
                self._attend(result, context)
        except CompilationCancelled as exc:
            self._record_cancelled(result, exc, context)
        except Exception as exc:
            context.logger.debug("Unexpected failure compiling batch", exc_info=True)
            result.errors.append(f"Error compiling files: {exc}")

        context.logger.info(
            "Compiled %d files: %d resources, %d errors, %d warnings",
            len(files),
            len(result.resources),
            len(result.errors),
            len(result.warnings),
        )
        return result

    def compile_project(
        self,
        archive: bytes | BinaryIO,
        *,
        context: CompilationContext | None = None,
    ) -> CompilationResult:
        """Compile the files referenced by the descriptor inside a ZIP archive."""
        context = self._new_context(context)
        suffix = self.config.project.descriptor_suffix
        result = CompilationResult(
            metadata={"compiled_at": _utc_now(), "type": "project"}
        )
        context.logger.info("Compiling project from zip archive")

        try:
            entries = _extract_entries(archive)
            descriptor, files = self._split_descriptor(entries, result, context)
            if descriptor is None:
                message = f"No {suffix} file found in archive"
                context.logger.error(message)
                result.errors.append(message)
                return result

            descriptor_name, descriptor_text = descriptor
            context.logger.info("Parsing %s file %s", suffix, descriptor_name)
            context.checkpoint(f"parsing {descriptor_name}")
            graph = self._run_stage(
                "descriptor", descriptor_name, self.descriptor_parser.parse, descriptor_text
            )
            graph.name = graph.name or PurePosixPath(descriptor_name).stem
            result.metadata["descriptor_file"] = descriptor_name

            try:
                self.resolver.resolve(graph, files, result, context)
            finally:
                result.metadata["project_graph"] = graph_to_dict(graph)

            if result.resources:
                context.logger.info("Computing self-attention matrix for project")
                self._attend(result, context)
        except CompilationCancelled as exc:
            self._record_cancelled(result, exc, context)
        except Exception as exc:
            context.logger.debug("Unexpected failure compiling project", exc_info=True)
            result.errors.append(f"Error compiling project: {exc}")

        context.logger.info(
            "Compiled project: %d resources, %d errors, %d warnings",
            len(result.resources),
            len(result.errors),
            len(result.warnings),
        )
        return result

    # ------------------------------------------------------------------
    # Unit pipeline

    def _compile_unit(
        self,
        content: str,
        file_name: str,
        context: CompilationContext,
        content_type: str | None = None,
    ) -> CompilationResult:
        """Tokenize, parse and analyze one blob without computing attention."""
        unit = CompilationResult()
        content_type = content_type or self.config.content_type_for(file_name)
        try:
            resource = self._run_pipeline(content, file_name, content_type, context)
        except CompilationCancelled:
            raise
        except CompilationError as exc:
            context.logger.error("Error compiling %s: %s", file_name, exc)
            context.logger.debug("Stage failure detail for %s", file_name, exc_info=True)
            unit.errors.append(f"Error compiling {file_name}: {exc}")
            return unit

        if resource is None:
            context.logger.warning("No fragments extracted from %s", file_name)
            unit.warnings.append(f"No fragments extracted from {file_name}")
        else:
            unit.resources.append(resource)
        return unit

    def _run_pipeline(
        self,
        content: str,
        file_name: str,
        content_type: str,
        context: CompilationContext,
    ) -> Optional[ParsedResource]:
        log = unit_logger(context.logger, file_name)
        context.checkpoint(f"tokenizing {file_name}")
        log.debug("Tokenizing as %s", content_type)
        tokenizer = self.tokenizers.get(content_type)
        fragments = self._run_stage("tokenize", file_name, tokenizer.tokenize, content)
        if not fragments:
            return None

        context.checkpoint(f"parsing {file_name}")
        log.debug("Building block tree from %d fragments", len(fragments))
        resource = self._run_stage(
            "parse", file_name, self.parser.parse, fragments, file_name, content_type
        )
        block_count = len(resource.blocks)

        context.checkpoint(f"analyzing {file_name}")
        log.debug("Analyzing semantics of %d blocks", block_count)
        analyzed = self._run_stage("analyze", file_name, self.analyzer.analyze, resource)
        if len(analyzed.blocks) != block_count:
            raise StageFailure(
                "analyze",
                file_name,
                ValueError(
                    f"analyzer changed block count from {block_count} to {len(analyzed.blocks)}"
                ),
            )
        return analyzed

    @staticmethod
    def _run_stage(stage: str, unit: str, func: Callable[..., _T], *args: object) -> _T:
        try:
            return func(*args)
        except (CompilationCancelled, StageFailure):
            raise
        except Exception as exc:
            raise StageFailure(stage, unit, exc) from exc

    def _attend(self, result: CompilationResult, context: CompilationContext) -> None:
        context.checkpoint("attention")
        try:
            result.attention_matrix = self.attention.compute(result.resources, context)
        except Exception as exc:
            context.logger.error("Error computing attention: %s", exc)
            context.logger.debug("Attention failure detail", exc_info=True)
            result.attention_matrix = None
            result.errors.append(f"Error computing attention: {exc}")

    # ------------------------------------------------------------------
    # Helpers

    def _split_descriptor(
        self,
        entries: Dict[str, str],
        result: CompilationResult,
        context: CompilationContext,
    ) -> Tuple[Optional[Tuple[str, str]], Dict[str, str]]:
        suffix = self.config.project.descriptor_suffix.lower()
        descriptors: List[Tuple[str, str]] = []
        files: Dict[str, str] = {}
        for name, content in entries.items():
            if name.lower().endswith(suffix):
                descriptors.append((name, content))
            else:
                files[name] = content

        if not descriptors:
            return None, files
        chosen = descriptors[0]
        context.logger.info("Found %s file: %s", suffix, chosen[0])
        for ignored, _ in descriptors[1:]:
            context.logger.warning("Ignoring additional descriptor %s", ignored)
            result.warnings.append(f"Ignoring additional descriptor {ignored}; using {chosen[0]}")
        return chosen, files

    def _new_context(self, context: CompilationContext | None) -> CompilationContext:
        if context is not None:
            return context
        return CompilationContext.with_timeout(self.config.timeout_seconds, logger=self.logger)

    @staticmethod
    def _record_cancelled(
        result: CompilationResult, exc: CompilationCancelled, context: CompilationContext
    ) -> None:
        context.logger.warning("Compilation cancelled: %s", exc)
        result.attention_matrix = None
        result.errors.append(f"Compilation cancelled: {exc}")


def _extract_entries(archive: bytes | BinaryIO) -> Dict[str, str]:
    """Read every file entry of a ZIP archive as text, keyed by its full name."""
    source = io.BytesIO(archive) if isinstance(archive, (bytes, bytearray)) else archive
    entries: Dict[str, str] = {}
    try:
        with zipfile.ZipFile(source) as bundle:
            for info in bundle.infolist():
                if info.is_dir() or not PurePosixPath(info.filename).name:
                    continue
                entries[info.filename] = bundle.read(info).decode("utf-8", errors="replace")
    except zipfile.BadZipFile as exc:
        raise InputError(f"Invalid project archive: {exc}") from exc
    return entries


def _utc_now() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


__all__ = ["Orchestrator"]
