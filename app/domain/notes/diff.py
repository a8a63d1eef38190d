import re
from itertools import islice

HUNK_HEADER_PATTERN = re.compile(r"^@@[^\n]*?@@", re.MULTILINE)


def count_hunks(diff: str) -> int:
    """diff에 포함된 hunk 개수"""
    return sum(1 for _ in HUNK_HEADER_PATTERN.finditer(diff))


def truncate_diff(full_diff: str, max_hunks: int) -> str:
    """diff를 앞에서부터 max_hunks개의 hunk로 자른다.

    hunk는 `@@ ... @@` 헤더 줄부터 다음 헤더 직전(또는 문자열 끝)까지다.
    hunk가 max_hunks개 미만이면 원문을 그대로 반환하고, 그 이상이면
    앞쪽 max_hunks개의 hunk만 원래 순서대로 이어 붙여 반환한다.
    첫 헤더 이전의 텍스트는 잘린 결과에 포함되지 않는다.

    Args:
        full_diff: unified diff 원문
        max_hunks: 남길 hunk 최대 개수

    Returns:
        잘린 diff, 또는 원문

    Raises:
        ValueError: max_hunks가 1 미만인 경우
    """
    if max_hunks < 1:
        raise ValueError(f"max_hunks는 1 이상이어야 합니다: {max_hunks}")

    # 마지막 hunk의 끝을 알기 위해 헤더를 하나 더 찾는다
    headers = list(islice(HUNK_HEADER_PATTERN.finditer(full_diff), max_hunks + 1))
    if len(headers) < max_hunks:
        return full_diff

    hunks = []
    for idx in range(max_hunks):
        start = headers[idx].start()
        end = headers[idx + 1].start() if idx + 1 < len(headers) else len(full_diff)
        hunks.append(full_diff[start:end])

    return "".join(hunks)
