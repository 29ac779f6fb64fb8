def extract_json(text: str) -> str:
    """
    Return the substring from the first '{' to the last '}' of model output.
    Prose and markdown fences around the object are dropped. If there is no
    such span the text is returned unchanged so the parse step reports it.
    """
    text = text or ""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return text
    return text[start : end + 1]


def extract_balanced_json(text: str) -> str:
    """
    Stricter variant: the first complete brace-balanced object, ignoring
    braces inside JSON string literals. One pass over the text; when the
    outermost object never closes (truncated output) the earliest inner
    object that did close is returned. Falls back to the raw text.
    """
    text = text or ""
    starts = []
    best = None
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == "{":
            starts.append(i)
        elif not starts:
            continue
        elif ch == '"':
            in_string = True
        elif ch == "}":
            start = starts.pop()
            if not starts:
                return text[start : i + 1]
            if best is None or start < best[0]:
                best = (start, i)
    if best is not None:
        return text[best[0] : best[1] + 1]
    return text


EXTRACTORS = {
    "span": extract_json,
    "balanced": extract_balanced_json,
}


def get_extractor(name: str):
    if name not in EXTRACTORS:
        raise KeyError(f"Unknown JSON_EXTRACTION: {name}. Known: {list(EXTRACTORS.keys())}")
    return EXTRACTORS[name]
