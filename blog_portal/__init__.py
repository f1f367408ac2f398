"""
博客门户客户端

读者浏览、搜索、分页阅读文章；管理员通过表单创建文章与分类。
"""

__version__ = "1.0.0"
