"""构建步骤引擎工厂

把构建步骤声明转换为引擎句柄。句柄只负责给出要执行的命令行，
真正的执行由外部构建引擎完成。

声明形式:
    build:
      - ./configure --prefix=/usr         # 字符串等价于 shell
      - shell: make -j4
      - make: install
      - make: {target: check, args: [V=1], dir: build}
      - script: {path: scripts/post.sh, args: [--fast]}
"""

from __future__ import annotations

import shlex
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pkgforge.core.exceptions import BuildStepError


def _as_args(value: Any, step: Any) -> list[str]:
    """参数统一为字符串列表：字符串按 shell 规则切分"""
    if value is None:
        return []
    if isinstance(value, str):
        try:
            return shlex.split(value)
        except ValueError as e:
            raise BuildStepError(f"命令行无法解析（{e}）: {step!r}") from e
    if isinstance(value, list) and all(isinstance(v, (str, int, float)) for v in value):
        return [str(v) for v in value]
    raise BuildStepError(f"无法识别的参数列表: {step!r}")


@dataclass(frozen=True)
class ShellEngine:
    """执行一条 shell 命令"""

    command: tuple[str, ...]

    kind = "shell"

    def argv(self) -> list[str]:
        return list(self.command)


@dataclass(frozen=True)
class MakeEngine:
    """调用 make 目标"""

    target: str = ""
    args: tuple[str, ...] = ()
    dir: str = ""

    kind = "make"

    def argv(self) -> list[str]:
        cmd = ["make"]
        if self.dir:
            cmd += ["-C", self.dir]
        if self.target:
            cmd.append(self.target)
        return cmd + list(self.args)


@dataclass(frozen=True)
class ScriptEngine:
    """执行包内脚本"""

    path: str
    args: tuple[str, ...] = ()

    kind = "script"

    def argv(self) -> list[str]:
        return [self.path, *self.args]


BuildEngine = ShellEngine | MakeEngine | ScriptEngine


def _shell(spec: Any, step: Any) -> ShellEngine:
    command = _as_args(spec, step)
    if not command:
        raise BuildStepError(f"shell 步骤缺少命令: {step!r}")
    return ShellEngine(command=tuple(command))


def _make(spec: Any, step: Any) -> MakeEngine:
    if spec is None or isinstance(spec, str):
        return MakeEngine(target=spec or "")
    if isinstance(spec, dict):
        return MakeEngine(
            target=str(spec.get("target") or ""),
            args=tuple(_as_args(spec.get("args"), step)),
            dir=str(spec.get("dir") or ""),
        )
    raise BuildStepError(f"无法识别的 make 步骤: {step!r}")


def _script(spec: Any, step: Any) -> ScriptEngine:
    if isinstance(spec, str) and spec:
        return ScriptEngine(path=spec)
    if isinstance(spec, dict) and spec.get("path"):
        return ScriptEngine(
            path=str(spec["path"]),
            args=tuple(_as_args(spec.get("args"), step)),
        )
    raise BuildStepError(f"script 步骤缺少 path: {step!r}")


_ENGINES: dict[str, Callable[[Any, Any], BuildEngine]] = {
    "shell": _shell,
    "make": _make,
    "script": _script,
}


def create(step: Any) -> BuildEngine:
    """根据构建步骤声明创建引擎句柄

    Raises:
        BuildStepError: 声明格式无效或引擎类型未知
    """
    if isinstance(step, str):
        return _shell(step, step)
    if not isinstance(step, dict) or len(step) != 1:
        raise BuildStepError(f"构建步骤必须是字符串或单键映射: {step!r}")
    engine, spec = next(iter(step.items()))
    factory = _ENGINES.get(engine)
    if factory is None:
        raise BuildStepError(
            f"未知的构建引擎 '{engine}'，可用: {', '.join(_ENGINES)}"
        )
    return factory(spec, step)
