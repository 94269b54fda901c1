"""Render the page's current phase as a self-contained static HTML snapshot."""

import logging
from html import escape
from pathlib import Path

from loveflix.duration import DURATION_LABELS
from loveflix.gate import EntranceGate
from loveflix.models import Duration
from loveflix.page import SurprisePage
from loveflix.views.journey import JourneyView
from loveflix.views.netflix import (
    BRAND,
    EMPTY_HINT,
    EMPTY_TITLE,
    PROFILE_PROMPT,
    STORY_TITLE,
    NetflixBrowser,
    View,
)

logger = logging.getLogger(__name__)

_CSS = """
  * { margin: 0; padding: 0; box-sizing: border-box; }
  body { font-family: 'Prompt', 'Montserrat', sans-serif; background: hsl(0, 0%, 5%);
         color: hsl(0, 0%, 90%); padding: 24px; }
  h1, h2 { color: hsl(350, 40%, 80%); font-weight: 300; letter-spacing: .05em; margin-bottom: 12px; }
  .brand { color: hsl(350, 60%, 55%); font-weight: 800; letter-spacing: .2em; }
  .card { background: rgba(255,255,255,0.05); border: 1px solid rgba(255,255,255,0.1);
          border-radius: 16px; padding: 24px; margin: 16px 0; }
  .duration { display: flex; gap: 12px; flex-wrap: wrap; }
  .duration div { text-align: center; min-width: 80px; }
  .duration span { display: block; font-size: 32px; color: hsl(350, 60%, 70%); }
  .duration small { color: #999; }
  .timeline .left { text-align: right; } .timeline .right { text-align: left; }
  .timeline .center { text-align: center; }
  .row { display: flex; gap: 12px; overflow-x: auto; }
  .tile { min-width: 200px; }
  .tile img { width: 200px; height: 120px; object-fit: cover; border-radius: 8px; }
  .muted { color: #888; font-size: 14px; }
  .error { color: hsl(350, 60%, 60%); }
"""


def _duration_html(duration: Duration) -> str:
    cells = "".join(
        f"<div><span>{value:02d}</span><small>{label}</small></div>"
        for value, label in zip(duration.values(), DURATION_LABELS)
    )
    return f'<div class="duration">{cells}</div>'


def _entrance_html(gate: EntranceGate) -> str:
    error = f'<p class="error">{escape(gate.error)}</p>' if gate.error else ""
    countdown = f"<h1>{gate.count}</h1>" if gate.counting and gate.count > 0 else ""
    return f"""<section class="card">
<h1>Our Memories</h1>
<p class="muted">ใส่รหัสเพื่อเข้าสู่ความทรงจำของเรา...</p>
<form><input type="password" placeholder="Enter password"><button>เข้าสู่ความทรงจำ</button></form>
{error}{countdown}
</section>"""


def _journey_html(view: JourneyView) -> str:
    name1, name2 = view.couple_names
    chapters = "".join(
        f'<div class="card {escape(e.side)}"><h2>{escape(e.chapter.title)}</h2>'
        f"<p>{escape(e.chapter.text)}</p></div>"
        for e in view.timeline()
    )
    if view.gallery_empty_message:
        gallery = f'<p class="muted">{escape(view.gallery_empty_message)}</p>'
    else:
        gallery = "".join(
            f'<figure class="tile"><img src="{escape(p.src, quote=True)}" '
            f'alt="{escape(p.caption or f"Memory {i + 1}", quote=True)}">'
            f"<figcaption>{escape(p.caption or '')}</figcaption></figure>"
            for i, p in enumerate(view.content.photos)
        )
    return f"""<section>
<p class="muted">เรื่องราวของ</p>
<h1>{escape(name1)} &amp; {escape(name2)}</h1>
<p>{escape(view.opening_text)}</p>
</section>
<section class="card"><h2>เราคบกันมาแล้ว</h2>{_duration_html(view.duration)}</section>
<section class="timeline"><h2>เรื่องราวของเรา</h2>{chapters}</section>
<section><h2>ความทรงจำของเรา</h2><div class="row">{gallery}</div></section>
<section class="card"><h2 class="brand">{BRAND}</h2></section>"""


def _tile(item) -> str:
    image = getattr(item, "thumbnail", None) or getattr(item, "src", None)
    title = getattr(item, "title", None) or getattr(item, "caption", None) or ""
    img = f'<img src="{escape(image, quote=True)}" alt="{escape(title, quote=True)}">' if image else ""
    return f'<div class="tile">{img}<p>{escape(title)}</p></div>'


def _netflix_html(view: NetflixBrowser) -> str:
    settings = view.content.settings
    if view.view == View.PROFILES:
        profiles = "".join(
            f'<div class="tile" style="background:{escape(p.color, quote=True)}">'
            f"<h2>{escape(p.initial)}</h2><p>{escape(p.name)}</p></div>"
            for p in view.profiles
        )
        return f'<section><h1>{PROFILE_PROMPT}</h1><div class="row">{profiles}</div></section>'
    if view.view == View.STORY:
        chapters = "".join(
            f'<div class="card"><h2>{escape(c.title)}</h2><p>{escape(c.text)}</p></div>'
            for c in view.content.chapters
        )
        return f"<section><h1>{STORY_TITLE}</h1>{chapters}</section>"
    if view.view == View.PLAYER and view.player is not None:
        video = view.player.video
        return (
            f'<section><h1>{escape(video.title)}</h1>'
            f'<video src="{escape(video.video_url, quote=True)}" controls playsinline></video></section>'
        )
    if view.view == View.LIGHTBOX and view.lightbox is not None:
        photo = view.lightbox.current
        return (
            f'<section><img src="{escape(photo.src, quote=True)}" alt="{escape(view.lightbox.alt_text, quote=True)}">'
            f"<p>{escape(photo.caption or '')}</p><p class=\"muted\">{view.lightbox.counter}</p></section>"
        )

    hero = view.hero()
    hero_style = f' style="background-image:url({escape(hero.image, quote=True)})"' if hero.image else ""
    rows = "".join(
        f'<section><h2>{escape(row.title)}</h2><div class="row">{"".join(_tile(i) for i in row.items)}</div></section>'
        for row in view.rows()
    )
    empty = (
        f'<section class="card"><h2>{EMPTY_TITLE}</h2><p class="muted">{EMPTY_HINT}</p></section>'
        if view.is_empty else ""
    )
    return f"""<header><h1 class="brand">{BRAND}</h1><span>{escape(view.duration.compact)}</span></header>
<section class="card hero"{hero_style}>
<p class="muted">เรื่องราวของ</p>
<h1>{escape(settings.name1)} &amp; {escape(settings.name2)}</h1>
<p>{escape(hero.tagline)}</p>
</section>
<section class="card"><h2>เราคบกันมาแล้ว</h2>{_duration_html(view.duration)}</section>
{rows}{empty}"""


def render_page(page: SurprisePage) -> str:
    view = page.view
    if isinstance(view, EntranceGate):
        body = _entrance_html(view)
    elif isinstance(view, JourneyView):
        body = _journey_html(view)
    elif isinstance(view, NetflixBrowser):
        body = _netflix_html(view)
    else:
        body = '<p class="muted">…</p>'

    return f"""<!DOCTYPE html>
<html lang="th">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{BRAND} - Our Story</title>
<style>{_CSS}</style>
</head>
<body data-phase="{page.phase.value}">
{body}
</body>
</html>"""


def write_snapshot(page: SurprisePage, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_page(page), encoding="utf-8")
    logger.info("Snapshot written to %s", output_path)
    return output_path
