from __future__ import annotations
import logging
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from ezdxf import DXFError

from .errors import EncodeFailure
from .export_dxf import encode_dxf
from .export_pdf import encode_pdf
from .export_png import encode_png
from .models import ExportFormat, Project, export_filename
from .state import encode_project

logger = logging.getLogger(__name__)

ENCODERS: Dict[ExportFormat, Callable[..., Optional[bytes]]] = {
    ExportFormat.JSON: encode_project,
    ExportFormat.PDF: encode_pdf,
    ExportFormat.PNG: encode_png,
    ExportFormat.DXF: encode_dxf,
}


def export_project(project: Project, fmt: ExportFormat, **options) -> bytes:
    """Encode ``project`` as ``fmt``. Raises EncodeFailure if nothing usable comes out."""
    try:
        data = ENCODERS[fmt](project, **options)
    except EncodeFailure:
        raise
    except (DXFError, ArithmeticError, RuntimeError, ValueError, TypeError, OSError) as e:
        raise EncodeFailure(fmt, f"{fmt.value} export failed: {e}") from e
    if not data:
        raise EncodeFailure(fmt)
    logger.debug("Encoded %s as %s (%d bytes)", project.name, fmt.value, len(data))
    return data


def write_export(project: Project, fmt: ExportFormat, directory: Union[str, Path],
                 **options) -> Path:
    """Encode first, then write; a failed encode leaves no file behind."""
    data = export_project(project, fmt, **options)
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(project, fmt)
    path.write_bytes(data)
    logger.info("Exported %s", path)
    return path


def export_in_background(project: Project, fmt: ExportFormat, executor: Executor,
                         **options) -> Future:
    """The worker gets its own copy, so later edits never race the encoder."""
    return executor.submit(export_project, project.copy(), fmt, **options)
