"""统一异常体系

所有业务异常继承 PkgForgeError，CLI 层据此输出友好提示。
包描述构造失败统一归入 PackageError 分支，协作者（摘要、代码仓、构建步骤）
各自有独立异常类型，构造过程不捕获、原样上抛。
"""

from __future__ import annotations

from typing import Any


class PkgForgeError(Exception):
    """框架基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(PkgForgeError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(PkgForgeError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


# =========================================================================
# 包描述构造
# =========================================================================


class PackageError(PkgForgeError):
    """包描述构造失败"""

    code = "PACKAGE_ERROR"


class InvalidArgumentError(PackageError):
    """描述为空或不是映射"""

    code = "INVALID_ARGUMENT"

    def __init__(self, meta: Any = None) -> None:
        super().__init__(f"无效参数: 包描述必须是映射，实际为 {type(meta).__name__}")
        self.meta = meta


class MissingSectionError(PackageError):
    """缺少必需的配置段"""

    code = "MISSING_SECTION"

    def __init__(self, section: str) -> None:
        super().__init__(f"缺少配置段: {section}")
        self.section = section


class MissingFieldError(PackageError):
    """缺少必填字段"""

    code = "MISSING_FIELD"

    def __init__(self, field: str) -> None:
        super().__init__(f"缺少字段: {field}")
        self.field = field


class InvalidVersionError(PackageError):
    """版本号不符合语义化版本规范"""

    code = "INVALID_VERSION"

    def __init__(self, version: Any) -> None:
        super().__init__(f"无效版本号: {version!r}")
        self.version = version


class InvalidDependencyError(PackageError):
    """依赖声明格式无法识别"""

    code = "INVALID_DEPENDENCY"

    def __init__(self, value: Any) -> None:
        super().__init__(f"无效依赖声明: {value!r}")
        self.value = value


class InvalidSourceError(PackageError):
    """源声明不是映射"""

    code = "INVALID_SOURCE"

    def __init__(self, value: Any) -> None:
        super().__init__(f"无效源声明: {value!r}")
        self.value = value


class MissingSourceFileError(PackageError):
    """源声明既没有 file/dir 也没有 scm"""

    code = "MISSING_SOURCE_FILE"

    def __init__(self, value: Any = None) -> None:
        super().__init__(f"源声明中缺少文件名: {value!r}")
        self.value = value


class UnknownOriginError(PackageError):
    """需要下载的源没有声明来源，或来源协议不受支持"""

    code = "UNKNOWN_ORIGIN"

    def __init__(self, file: Any, reason: str = "") -> None:
        detail = f" ({reason})" if reason else ""
        super().__init__(f"未知的文件来源: {file}{detail}")
        self.file = file


class DuplicatePackageError(PackageError):
    """同一 full_name 注册了两个不同实例"""

    code = "DUPLICATE_PACKAGE"

    def __init__(self, full_name: str) -> None:
        super().__init__(f"包已注册为其他实例: {full_name}")
        self.full_name = full_name


# =========================================================================
# 协作者
# =========================================================================


class DigestError(PkgForgeError):
    """摘要格式错误或校验不通过"""

    code = "DIGEST_ERROR"


class ScmError(PkgForgeError):
    """代码仓声明无效"""

    code = "SCM_ERROR"


class BuildStepError(PkgForgeError):
    """构建步骤声明无效"""

    code = "BUILD_STEP_ERROR"
