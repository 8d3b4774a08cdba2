"""Root test configuration: a sample blog tree and session-level cleanup of runtime artifacts"""

import shutil
from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["postmatter.db", "test.db"]
_CLEANUP_DIRS = ["dist"]


POST_CRUD = """\
---
title: Build a book CRUD API
date: "2020-05-10T23:46:37.121Z"
template: "post"
draft: false
slug: "/posts/book-crud-api/"
category: "Go"
tags:
  - "Go"
  - "REST"
description: "Building a small CRUD API for books."
---

We will build a REST API for books.

```go
func main() {
    r := gin.Default()
}
```

![routes](/media/crud.png)
"""

POST_JWT = """\
---
title: JWT authentication from scratch
date: 2020-06-01
template: post
slug: /posts/jwt-auth/
category: Go
tags: [Go, JWT, Go]
description: Issuing and verifying tokens.
---

Tokens are signed with a secret key.
"""

POST_DRAFT = """\
---
title: A gentle introduction to Go
date: 2020-07-01T09:00:00
template: post
draft: true
slug: /posts/go-intro/
category: Go
tags: [Go]
---

Work in progress.
"""

PAGE_ABOUT = """\
---
title: "About me"
template: "page"
socialImage: "/media/photo.jpg"
---

I write about backend development.
"""


def write_blog(root: Path) -> Path:
    """Lay out posts/ and pages/ the way the blog repository does."""
    files = {
        "posts/2020-05-10---book-crud-api/index.md": POST_CRUD,
        "posts/2020-06-01---jwt-auth/index.md": POST_JWT,
        "posts/2020-07-01---go-intro/index.md": POST_DRAFT,
        "pages/about/index.md": PAGE_ABOUT,
    }
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture(name="blog_dir")
def blog_dir_fixture(tmp_path):
    """A content tree with two published posts, one draft, and an about page without a slug."""
    return write_blog(tmp_path / "content")


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files and output directories created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)
