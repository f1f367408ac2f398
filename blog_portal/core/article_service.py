#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
文章与分类服务模块 - 封装 /articles 与 /categories 调用，并把服务端记录转换为展示模型
"""

import logging
from typing import Any, List, Optional, Tuple

from blog_portal.models import Article, ArticleDraft, Category, CategoryDraft
from blog_portal.core.cancellation_flag import CancellationFlag
from blog_portal.core.exception import ApiError
from blog_portal.utils.api_client import ApiClient

ARTICLES_PATH = "articles"
CATEGORIES_PATH = "categories"

RELATED_ARTICLES_LIMIT = 3


def _records(response: Any, allow_bare_list: bool = False) -> List[dict]:
    """从 {data: [...]} (或裸列表) 中取出记录列表，结构不对时抛出 ApiError"""
    if isinstance(response, dict) and isinstance(response.get("data"), list):
        return response["data"]
    if allow_bare_list and isinstance(response, list):
        return response
    raise ApiError("Invalid API response structure", payload=response)


class ArticleService:
    """文章的读取与创建"""

    def __init__(self, api_client: ApiClient):
        self.logger = logging.getLogger('blog_portal.core.article_service')
        self.api_client = api_client

    def get_articles(self, cancel_flag: Optional[CancellationFlag] = None) -> List[Article]:
        """
        获取全部文章并转换为 Article。

        Raises:
            ApiError: 请求失败或响应结构无效。
        """
        response = self.api_client.get(ARTICLES_PATH, cancel_flag=cancel_flag)
        records = _records(response)
        articles = [Article.from_api_record(record, index) for index, record in enumerate(records)]
        self.logger.info(f"Loaded {len(articles)} articles (server total: "
                         f"{response.get('total', 'N/A')}, page: {response.get('page', 'N/A')}).")
        return articles

    def get_article_with_related(self, article_id: str,
                                 cancel_flag: Optional[CancellationFlag] = None
                                 ) -> Tuple[Optional[Article], List[Article]]:
        """
        查找单篇文章及同分类的相关文章 (最多 3 篇，不含自身)。

        Returns:
            (article, related)；文章不存在时为 (None, [])。
        """
        articles = self.get_articles(cancel_flag=cancel_flag)
        article = next((a for a in articles if a.id == str(article_id)), None)
        if article is None:
            self.logger.info(f"Article '{article_id}' not found among {len(articles)} articles.")
            return None, []
        related = [a for a in articles if a.category == article.category and a.id != article.id]
        return article, related[:RELATED_ARTICLES_LIMIT]

    def create_article(self, draft: ArticleDraft,
                       cancel_flag: Optional[CancellationFlag] = None) -> Any:
        result = self.api_client.post(ARTICLES_PATH, draft.to_payload(), cancel_flag=cancel_flag)
        self.logger.info(f"Article created: '{draft.title[:50]}'")
        return result


class CategoryService:
    """分类的读取与创建"""

    def __init__(self, api_client: ApiClient):
        self.logger = logging.getLogger('blog_portal.core.category_service')
        self.api_client = api_client

    def get_categories(self, cancel_flag: Optional[CancellationFlag] = None) -> List[Category]:
        response = self.api_client.get(CATEGORIES_PATH, cancel_flag=cancel_flag)
        categories = [Category.from_api_record(r) for r in _records(response, allow_bare_list=True)]
        self.logger.info(f"Loaded {len(categories)} categories.")
        return categories

    def create_category(self, draft: CategoryDraft,
                        cancel_flag: Optional[CancellationFlag] = None) -> Any:
        result = self.api_client.post(CATEGORIES_PATH, draft.to_payload(), cancel_flag=cancel_flag)
        self.logger.info(f"Category created: '{draft.name}'")
        return result
