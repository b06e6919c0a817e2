# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
from typing import Iterable, Optional

from ..domain.signatures import (
    BINARY_UNKNOWN,
    MAX_SIGNATURE_LENGTH,
    SIGNATURE_TABLE,
    TEXT_UNKNOWN,
    FileType,
    SignatureEntry,
)

logger = logging.getLogger(__name__)


def match_signature(
    buffer: bytes, table: Iterable[SignatureEntry] = SIGNATURE_TABLE
) -> Optional[SignatureEntry]:
    """Return the first entry matching ``buffer``; entries longer than the buffer are skipped."""
    for entry in table:
        if entry.matches(buffer):
            return entry
    return None


def detect_type(buffer: bytes) -> FileType:
    """
    Classify a byte buffer by its leading signature.

    Pure function of the buffer. Only the first MAX_SIGNATURE_LENGTH bytes matter.
    With no signature match the result is binary/unknown when the sampled prefix holds
    a NUL byte, and text/unknown otherwise (an empty buffer counts as text).
    """
    sample = bytes(buffer[:MAX_SIGNATURE_LENGTH])
    entry = match_signature(sample)
    if entry is not None:
        return entry.as_file_type()
    if b"\x00" in sample:
        return BINARY_UNKNOWN
    logger.debug("No signature matched %d byte sample; treating as text", len(sample))
    return TEXT_UNKNOWN
