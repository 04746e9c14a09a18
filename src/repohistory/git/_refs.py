"""Reference catalog built from `git show-ref` output."""

from collections.abc import Iterable, Sequence

from repohistory.enums import RefKind

from ._models import RefCatalog, Reference

HEADS_PREFIX = "refs/heads/"
TAGS_PREFIX = "refs/tags/"
REMOTES_PREFIX = "refs/remotes/"
DEREFERENCE_SUFFIX = "^{}"


def show_ref_args(*, include_remotes: bool) -> list[str]:
    args = ["show-ref"]
    if not include_remotes:
        args.extend(["--heads", "--tags"])
    args.extend(["-d", "--head"])
    return args


def _owning_remote(name: str, remotes: Sequence[str]) -> str | None:
    return next((remote for remote in remotes if name.startswith(f"{remote}/")), None)


def _parse_reference(
    commit_hash: str,
    ref: str,
    remotes: Sequence[str],
    hidden_prefixes: tuple[str, ...],
) -> Reference | None:
    if ref.startswith(HEADS_PREFIX):
        return Reference(hash=commit_hash, name=ref.removeprefix(HEADS_PREFIX), kind=RefKind.HEAD)
    if ref.startswith(TAGS_PREFIX):
        name = ref.removeprefix(TAGS_PREFIX)
        annotated = name.endswith(DEREFERENCE_SUFFIX)
        return Reference(
            hash=commit_hash,
            name=name.removesuffix(DEREFERENCE_SUFFIX),
            kind=RefKind.TAG,
            annotated=annotated,
        )
    if ref.startswith(REMOTES_PREFIX):
        if ref.startswith(hidden_prefixes):
            return None
        name = ref.removeprefix(REMOTES_PREFIX)
        return Reference(
            hash=commit_hash,
            name=name,
            kind=RefKind.REMOTE,
            remote=_owning_remote(name, remotes),
        )
    return None


def build_ref_catalog(
    lines: Iterable[str],
    *,
    remotes: Sequence[str] = (),
    hide_remotes: Sequence[str] = (),
) -> RefCatalog:
    """Index references by the hash they point at.

    Each line has the shape `<hash> <full ref path>`. Lines of any other
    shape and unrecognised ref paths are ignored. For an annotated tag, git
    lists the tag object and then the commit it dereferences to (suffixed
    with ^{}); only the dereferenced entry is kept, marked annotated.

    Args:
        lines: `show-ref -d --head` output lines.
        remotes: Known remote names, used to find a remote branch's remote.
        hide_remotes: Remotes whose branches are left out.

    Returns:
        The catalog. References for a hash keep their encounter order.
    """
    hidden_prefixes = tuple(f"{REMOTES_PREFIX}{remote}/" for remote in hide_remotes)
    head: str | None = None
    parsed: list[Reference] = []

    for line in lines:
        commit_hash, _, ref = line.partition(" ")
        if not commit_hash or not ref:
            continue
        if ref == "HEAD":
            head = commit_hash
            continue
        reference = _parse_reference(commit_hash, ref, remotes, hidden_prefixes)
        if reference is not None:
            parsed.append(reference)

    annotated_tags = {
        reference.name
        for reference in parsed
        if reference.kind is RefKind.TAG and reference.annotated
    }

    by_hash: dict[str, list[Reference]] = {}
    seen: set[tuple[RefKind, str]] = set()
    for reference in parsed:
        if (
            reference.kind is RefKind.TAG
            and not reference.annotated
            and reference.name in annotated_tags
        ):
            continue
        key = (reference.kind, reference.name)
        if key in seen:
            continue
        seen.add(key)
        by_hash.setdefault(reference.hash, []).append(reference)

    return RefCatalog(
        head=head,
        by_hash={commit_hash: tuple(refs) for commit_hash, refs in by_hash.items()},
    )
