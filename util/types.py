from typing import Dict, List


# Flow: serialized NoteIndex, authorId -> pageUrls.
IndexDto = Dict[str, List[str]]
