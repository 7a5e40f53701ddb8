"""
Playwright-backed page handle.

Everything the stabilizer and the capture strategies need from a live page goes
through this class: the PageMutator operations (inject_global_style,
force_element_visibility, rewrite_positioning), lazy-load stripping, scrolling,
measurement and raster capture. The pipeline code only talks to this
interface, so tests can hand it a fake page instead of a browser.
"""
import logging
from typing import Optional, Tuple

# 로깅 설정
logger = logging.getLogger(__name__)

STRIP_LAZY_LOADING_JS = """
() => {
  let count = 0;
  document.querySelectorAll('img[loading="lazy"], iframe[loading="lazy"]').forEach((el) => {
    el.removeAttribute('loading');
    count += 1;
  });
  // script-driven lazy loaders keep the real source in data-* attributes
  document.querySelectorAll('img[data-src], img[data-srcset], source[data-srcset]').forEach((el) => {
    if (el.dataset.src && !el.getAttribute('src')) el.setAttribute('src', el.dataset.src);
    if (el.dataset.srcset && !el.getAttribute('srcset')) el.setAttribute('srcset', el.dataset.srcset);
  });
  return count;
}
"""

FORCE_VISIBILITY_JS = """
([selector, addClass]) => {
  let count = 0;
  document.querySelectorAll(selector).forEach((el) => {
    el.style.setProperty('opacity', '1', 'important');
    el.style.setProperty('transform', 'none', 'important');
    el.style.setProperty('visibility', 'visible', 'important');
    if (addClass) el.classList.add(addClass);
    count += 1;
  });
  return count;
}
"""

# Matches are collected before any element is touched so that
# earlier rewrites do not shift the rects of later ones. All offsets are in
# document coordinates. A fixed element paints at the same viewport offset at
# every scroll position, so it is pinned where it sits at scroll origin (its
# first paint), regardless of where the page is currently scrolled.
REWRITE_POSITIONING_JS = """
([matcher, newValue]) => {
  const origin = (el) => {
    const p = el.offsetParent;
    if (p && getComputedStyle(p).position !== 'static') {
      const r = p.getBoundingClientRect();
      return {
        top: r.top + window.scrollY + p.clientTop,
        left: r.left + window.scrollX + p.clientLeft
      };
    }
    return { top: 0, left: 0 };
  };
  const pinX = matcher === 'fixed' ? 0 : window.scrollX;
  const pinY = matcher === 'fixed' ? 0 : window.scrollY;
  const matches = [];
  document.querySelectorAll('body *').forEach((el) => {
    const cs = getComputedStyle(el);
    if (cs.position === matcher) {
      const r = el.getBoundingClientRect();
      matches.push({ el, top: r.top + pinY, left: r.left + pinX, width: cs.width });
    }
  });
  for (const { el, top, left, width } of matches) {
    el.style.setProperty('position', newValue, 'important');
    if (newValue === 'absolute') {
      const o = origin(el);
      el.style.setProperty('top', (top - o.top) + 'px', 'important');
      el.style.setProperty('left', (left - o.left) + 'px', 'important');
      el.style.setProperty('right', 'auto', 'important');
      el.style.setProperty('bottom', 'auto', 'important');
      if (width && width.endsWith('px')) el.style.setProperty('width', width, 'important');
    } else if (newValue === 'static') {
      el.style.setProperty('top', 'auto', 'important');
    }
  }
  return matches.length;
}
"""

SCROLL_THROUGH_JS = """
async ([stepPx, intervalMs, maxSteps]) => {
  const delay = (ms) => new Promise((resolve) => setTimeout(resolve, ms));
  const docHeight = () => Math.max(
    document.body ? document.body.scrollHeight : 0,
    document.documentElement ? document.documentElement.scrollHeight : 0
  );
  window.scrollTo(0, 0);
  let steps = 0;
  while (steps < maxSteps) {
    const y = window.scrollY || window.pageYOffset || 0;
    if (y + window.innerHeight >= docHeight() - 1) break;
    window.scrollBy(0, stepPx);
    steps += 1;
    await delay(intervalMs);
  }
  // stay at the bottom: scrolling back up re-hides direction-sensitive reveals
  return steps;
}
"""

MEASURE_JS = """
() => ({
  totalHeight: Math.max(
    document.body ? document.body.scrollHeight : 0,
    document.documentElement ? document.documentElement.scrollHeight : 0
  ),
  viewportHeight: window.innerHeight
})
"""

PENDING_MEDIA_JS = "() => Array.from(document.images).filter((img) => !img.complete).length"


class PageHandle:
    def __init__(self, page):
        self.page = page

    async def strip_lazy_loading(self) -> int:
        return await self.page.evaluate(STRIP_LAZY_LOADING_JS)

    async def inject_global_style(self, css: str) -> None:
        await self.page.add_style_tag(content=css)

    async def force_element_visibility(self, selector: str, add_class: Optional[str] = None) -> int:
        return await self.page.evaluate(FORCE_VISIBILITY_JS, [selector, add_class])

    async def rewrite_positioning(self, matcher: str, new_value: str) -> int:
        return await self.page.evaluate(REWRITE_POSITIONING_JS, [matcher, new_value])

    async def scroll_through(self, step_px: int, interval_ms: int, max_steps: int) -> int:
        return await self.page.evaluate(SCROLL_THROUGH_JS, [step_px, interval_ms, max_steps])

    async def scroll_to(self, y: int) -> None:
        await self.page.evaluate("(y) => window.scrollTo(0, y)", y)

    async def measure(self) -> Tuple[int, int]:
        """Return (total document scroll height, viewport height)."""
        dims = await self.page.evaluate(MEASURE_JS)
        return int(dims["totalHeight"]), int(dims["viewportHeight"])

    async def pending_media(self) -> int:
        return await self.page.evaluate(PENDING_MEDIA_JS)

    async def screenshot(self, full_page: bool, quality: int) -> bytes:
        return await self.page.screenshot(type="jpeg", quality=quality, full_page=full_page)
