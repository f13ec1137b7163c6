"""版本控制来源解析

解析源声明中的 scm 段，并把同步所需的本地路径回填到 SourceEntry:
- file: 缓存中记录当前修订的文件，增量构建据此判断源码是否变化
- dir:  代码同步到的本地目录
- repo: 面向用户展示的仓库描述（url@ref）

声明形式:
    scm: https://github.com/org/foo.git
    scm: {type: git, repo: https://github.com/org/foo.git, ref: v1.2.0}

本模块不执行 clone/fetch，仅计算路径。
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pkgforge.core.config import get_config
from pkgforge.core.exceptions import ScmError

if TYPE_CHECKING:
    from pkgforge.core.pkg.models import SourceEntry

logger = logging.getLogger(__name__)

_SAFE_REF_RE = re.compile(r"^[a-zA-Z0-9_./@\-]+$")

DEFAULT_REF = "HEAD"


@dataclass(frozen=True)
class GitRepo:
    """Git 仓库句柄"""

    url: str
    ref: str
    dir: str
    file: str

    kind = "git"

    @property
    def repo(self) -> str:
        return f"{self.url}@{self.ref}"


ScmFactory = Callable[[dict[str, Any], Any, dict[str, Any]], Any]

_SCM_TYPES: dict[str, ScmFactory] = {}


def register_scm(scm_type: str, factory: ScmFactory) -> None:
    """注册代码仓类型，factory(source, entry, scm_spec) -> handle"""
    _SCM_TYPES[scm_type] = factory


def _normalize(scm: Any) -> dict[str, Any]:
    """把 scm 段统一为字典"""
    if isinstance(scm, str) and scm.strip():
        return {"type": get_config().default_scm, "repo": scm.strip()}
    if isinstance(scm, dict):
        spec = dict(scm)
        spec.setdefault("type", get_config().default_scm)
        return spec
    raise ScmError(f"无法识别的 scm 声明: {scm!r}")


def _sync_dir(entry: SourceEntry, name: str) -> Path:
    """同步目录: <cache_dir>/scm/<package full_name>/<name>"""
    pkg = entry.package
    owner = pkg.full_name if pkg is not None else "_orphan"
    return Path(get_config().cache_dir) / "scm" / owner / name


def _create_git(source: dict[str, Any], entry: SourceEntry, spec: dict[str, Any]) -> GitRepo:
    url = spec.get("repo") or spec.get("url")
    if not isinstance(url, str) or not url:
        raise ScmError(f"git 源缺少 repo: {spec!r}")
    ref = str(spec.get("ref") or spec.get("branch") or DEFAULT_REF)
    if not _SAFE_REF_RE.match(ref):
        raise ScmError(f"ref 包含非法字符: {ref}")

    name = str(source.get("file") or url.rstrip("/").split("/")[-1])
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if not name:
        raise ScmError(f"无法从仓库地址推导目录名: {url}")

    sync_dir = _sync_dir(entry, name)
    handle = GitRepo(url=url, ref=ref, dir=str(sync_dir), file=f"{sync_dir}.rev")
    entry.file = handle.file
    entry.dir = handle.dir
    entry.repo = handle.repo
    logger.debug("git 源已解析: %s -> %s", handle.repo, handle.dir)
    return handle


register_scm("git", _create_git)


def create(source: dict[str, Any], entry: SourceEntry) -> Any:
    """创建代码仓句柄，并回填 entry.file / entry.dir / entry.repo

    Raises:
        ScmError: 声明格式无效、类型未注册或缺少仓库地址
    """
    spec = _normalize(source.get("scm"))
    scm_type = str(spec["type"])
    factory = _SCM_TYPES.get(scm_type)
    if factory is None:
        raise ScmError(
            f"不支持的代码仓类型 '{scm_type}'，可用: {sorted(_SCM_TYPES)}"
        )
    return factory(source, entry, spec)
