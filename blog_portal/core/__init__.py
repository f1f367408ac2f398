"""
核心服务包

包含令牌解码、路由守卫、会话、列表控制器以及各类 API 服务。
"""
