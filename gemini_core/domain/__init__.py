"""领域层模型。

包含：
- models: Part / Content / Candidate 以及 generateContent 请求与响应模型。
- exceptions: 业务异常类型定义。
"""
