import logging
from pathlib import Path
from typing import Iterable, List, Union

from cdm import SourceFile

logger = logging.getLogger(__name__)

def load_source_file(path: Union[str, Path]) -> SourceFile:
    file_path = Path(path)
    # Undecodable bytes (spreadsheets, archives) must not stop the batch.
    with open(file_path, 'r', encoding='utf-8', errors='replace', newline='') as f:
        body = f.read()
    return SourceFile(body=body, file_name=file_path.name)

def load_payload_from_dir(dir_path: Union[str, Path]) -> List[SourceFile]:
    """
    Builds the input file sequence from every regular file in a directory, sorted by name.
    Sub-directories are skipped.
    """
    directory = Path(dir_path)
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    payload = [load_source_file(p) for p in sorted(directory.iterdir()) if p.is_file()]
    logger.info(f"Loaded {len(payload)} files from {directory}")
    return payload

def load_payload_from_paths(paths: Iterable[Union[str, Path]]) -> List[SourceFile]:
    """Accepts a mix of files and directories, keeping the given order."""
    payload: List[SourceFile] = []
    for path in paths:
        path = Path(path)
        if path.is_dir():
            payload.extend(load_payload_from_dir(path))
        elif path.is_file():
            payload.append(load_source_file(path))
        else:
            raise FileNotFoundError(f"Input not found: {path}")
    return payload
