"""pkgforge - 构建图中单个软件包的元数据模型"""

__version__ = "0.3.0"
