"""配置包"""
