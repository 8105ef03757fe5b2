"""
Atomic file writer for listing reports and JSON backups.
A reader never sees a half-written report or backup: temp-write → fsync → rename.
"""

import os
import json
import logging
import tempfile
import time
from pathlib import Path
from typing import Dict, Any

logger = logging.getLogger(__name__)


def write_text_atomic(content: str, output_path: Path) -> Dict[str, Any]:
    """
    Write text content atomically to prevent partial files.

    Uses temp-write → fsync → rename pattern for atomicity.

    Args:
        content: Text to write
        output_path: Final path for the file

    Returns:
        Dictionary with write results
    """
    start_time = time.monotonic()
    temp_path = None

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)

        # Temp file in same directory so the rename stays on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            suffix='.tmp',
            prefix=f'{output_path.stem}_',
            dir=output_path.parent
        )
        temp_path = Path(temp_path_str)

        with os.fdopen(temp_fd, 'w', encoding='utf-8') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, output_path)
        temp_path = None

        return {
            'status': 'completed',
            'output_path': str(output_path),
            'bytes_written': len(content.encode('utf-8')),
            'duration_seconds': time.monotonic() - start_time
        }

    except OSError as e:
        if temp_path is not None and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError as cleanup_error:
                logger.warning(f"Could not remove temp file {temp_path}: {cleanup_error}")

        return {
            'status': 'failed',
            'error': str(e),
            'output_path': str(output_path),
            'bytes_written': 0,
            'duration_seconds': time.monotonic() - start_time
        }


def write_json_atomic(payload: Any, output_path: Path) -> Dict[str, Any]:
    """
    Write a JSON document atomically.

    Args:
        payload: JSON-serializable value
        output_path: Path for the JSON file

    Returns:
        Dictionary with write results
    """
    try:
        # Serialize first so a bad payload never touches the filesystem
        json_content = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError) as e:
        return {
            'status': 'failed',
            'error': f'JSON serialization failed: {e}',
            'output_path': str(output_path),
            'bytes_written': 0
        }

    return write_text_atomic(json_content, output_path)


def write_both_atomic(
    report_markdown: str,
    report_content: Dict[str, Any],
    report_path: Path,
    content_path: Path
) -> Dict[str, Any]:
    """
    Write a rendered report and its content sidecar.

    If either write fails, neither file is left behind (all-or-nothing).

    Args:
        report_markdown: Rendered Markdown report
        report_content: Report content dictionary
        report_path: Path for the Markdown file
        content_path: Path for the JSON sidecar

    Returns:
        Dictionary with combined write results
    """
    report_result = write_text_atomic(report_markdown, report_path)

    if report_result['status'] != 'completed':
        return {
            'status': 'failed',
            'error': f"Report write failed: {report_result.get('error', 'Unknown')}",
            'report_written': False,
            'content_written': False
        }

    content_result = write_json_atomic(report_content, content_path)

    if content_result['status'] != 'completed':
        # Report succeeded but sidecar failed - remove report
        try:
            report_path.unlink()
        except OSError as e:
            logger.warning(f"Could not remove report {report_path}: {e}")

        return {
            'status': 'failed',
            'error': f"Content write failed: {content_result.get('error', 'Unknown')}",
            'report_written': False,
            'content_written': False
        }

    return {
        'status': 'completed',
        'report_path': str(report_path),
        'content_path': str(content_path),
        'report_bytes': report_result['bytes_written'],
        'content_bytes': content_result['bytes_written'],
        'report_written': True,
        'content_written': True
    }
