"""
摘要报告常量
"""

# 最小权重阈值（比例，1%）
MIN_WEIGHT_THRESHOLD = 0.01

# 分隔线宽度
SEPARATOR_WIDTH = 60

# 两个视图都为空时的输出
NO_DATA_MESSAGE = "No data available"

# 树形连接符
TEE = "├─ "
CORNER = "└─ "
PIPE = "│  "
BLANK = "   "
