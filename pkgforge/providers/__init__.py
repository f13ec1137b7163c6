"""包构造协作者

- digests.py: 摘要解析与校验
- origins.py: 下载来源句柄
- scm.py: 版本控制来源解析
- build_engine.py: 构建步骤引擎工厂
"""
