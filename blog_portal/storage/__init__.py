"""
本地存储包

负责会话 (令牌与用户对象) 的持久化。
"""
