from blog_portal.models import Article, ArticleDraft, Role, User


def test_role_parse_is_case_sensitive():
    assert Role.parse("Admin") is Role.ADMIN
    assert Role.parse(Role.USER) is Role.USER
    assert Role.parse("admin") is None
    assert Role.parse(None) is None


def test_user_dict_round_trip():
    user = User(id="7", username="eve", role=Role.ADMIN, email="eve@x.io")
    assert User.from_dict(user.to_dict()) == user


def test_user_from_dict_rejects_incomplete():
    assert User.from_dict({"id": "1", "username": "x", "role": "Root"}) is None
    assert User.from_dict({"username": "x", "role": "User"}) is None
    assert User.from_dict("nope") is None


def test_article_placeholder_is_positional():
    record = {"id": 10, "title": "T", "content": "C", "imageUrl": None}
    assert Article.from_api_record(record, 0).image_url == "https://picsum.photos/400/240?random=1"
    assert Article.from_api_record(record, 4).image_url == "https://picsum.photos/400/240?random=5"


def test_article_category_never_empty():
    assert Article(id="1", title="t", content="c", category="  ").category == "Uncategorized"
    record = {"id": 1, "category": {"name": ""}, "categoryId": 3}
    article = Article.from_api_record(record, 0)
    assert article.category == "Uncategorized"
    assert article.category_id == "3"


def test_article_draft_payload_omits_empty_image():
    draft = ArticleDraft(title="Title", content="body", excerpt="x", category="2")
    assert draft.to_payload() == {"title": "Title", "content": "body", "categoryId": "2"}
