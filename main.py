#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
博客门户客户端 - 主程序入口

该文件是应用程序的入口点，负责加载配置、设置日志记录、组装依赖注入容器并启动GUI应用程序。
"""

import logging
import os
import sys

from PySide6.QtWidgets import QApplication

from blog_portal import __version__
from blog_portal.config.settings import apply_config, load_dotenv_file
from blog_portal.containers import Container, bind_session_to_api_client
from blog_portal.ui.views.main_window import MainWindow
from blog_portal.utils.logger import get_logger, level_from_name, setup_logging

START_PATH = "/"


def main() -> int:
    """
    应用程序主函数。

    初始化日志、配置和UI，然后启动Qt事件循环。
    在退出时确保资源被正确关闭。
    """
    project_root = os.path.dirname(os.path.abspath(__file__))

    # --- 1. 加载 .env 与配置 ---
    dotenv_loaded = load_dotenv_file(project_root)
    container = Container()
    config = apply_config(container.config)

    # --- 2. 初始化日志 ---
    setup_logging(log_level=level_from_name(config["logging"]["level"]),
                  log_dir=config["logging"]["dir"])
    logger = get_logger("blog_portal.main")
    logger.info(f"应用程序启动 (version {__version__}, env={config['env']}, .env loaded: {dotenv_loaded})")
    logger.info(f"Python 版本: {sys.version}")
    logger.info(f"API base URL: {config['api']['base_url']}")

    # --- 3. 创建 QApplication ---
    app = QApplication(sys.argv)
    app.setApplicationName(config["settings"]["application"])
    app.setOrganizationName(config["settings"]["organization"])
    logger.info("QApplication创建成功")

    # --- 4. 恢复会话并同步到 ApiClient ---
    session = container.session_service()
    api_client = container.api_client()
    bind_session_to_api_client(session, api_client)
    user = session.restore()
    logger.info(f"恢复的会话用户: {user.username if user else '无'}")

    # --- 5. 主窗口 ---
    main_window = MainWindow(container=container, settings=container.qsettings())
    app.aboutToQuit.connect(api_client.close)
    logger.info("已连接 QApplication.aboutToQuit 信号到 ApiClient.close")

    main_window.show()
    container.router().navigate(START_PATH)
    logger.info("窗口显示完成，进入主事件循环")

    exit_code = app.exec()
    logger.info(f"应用程序退出，退出码: {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
