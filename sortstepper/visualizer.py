import logging

import pygame

from . import algorithms
from .config import Settings
from .controller import SortController
from .engine import RunState
from .sound import ToneEngine

logger = logging.getLogger(__name__)

# ============================================================
# ========================= UI THEME =========================
# ============================================================

UI_BG         = (8,   8,  14)
UI_PANEL      = (14, 14,  22)
UI_PANEL2     = (22, 22,  36)
UI_ACCENT     = (255, 55,  55)
UI_TEXT       = (215, 215, 228)
UI_SUBTEXT    = (105, 105, 130)
UI_HOVER      = (30,  22,  38)
UI_BORDER     = (38,  38,  58)
UI_DIM        = (60,  60,  80)
UI_GREEN      = (60, 200, 100)
BAR_COLOR     = (0, 128, 128)
ACTIVE_COLOR  = (255, 60, 60)

PAD      = 16
INPUT_Y  = 60
BTN_H    = 34
BTN_GAP  = 6
BARS_TOP = 110
FOOTER_H = 150

STATE_COLORS = {
    RunState.IDLE:      UI_SUBTEXT,
    RunState.RUNNING:   UI_ACCENT,
    RunState.CANCELLED: (255, 170, 60),
    RunState.COMPLETED: UI_GREEN,
    RunState.FAILED:    (255, 90, 90),
}

# ============================================================
# ========================= GEOMETRY =========================
# ============================================================

def bar_rects(values, settings: Settings, area: pygame.Rect):
    """
    Lay out one bar per value along the bottom edge of ``area``.

    Height is ``value * bar_scale`` pixels, clipped to the area; negative values
    get zero height. Bars narrow down when the configured width does not fit.
    """
    n = len(values)
    if n == 0:
        return []
    bw = min(settings.bar_width, max(1, area.width // n - settings.bar_gap))
    step = bw + settings.bar_gap
    x0 = area.x + max(0, (area.width - step * n) // 2)
    rects = []
    for i, v in enumerate(values):
        h = int(min(area.height, max(0.0, v * settings.bar_scale)))
        rects.append(pygame.Rect(x0 + i * step, area.bottom - h, bw, h))
    return rects


def wrap_text(text, font, width):
    lines, line = [], ""
    for word in text.split():
        trial = f"{line} {word}".strip()
        if line and font.size(trial)[0] > width:
            lines.append(line); line = word
        else:
            line = trial
    if line: lines.append(line)
    return lines

# ============================================================
# ========================= UI WIDGETS =======================
# ============================================================

class SmBtn:
    def __init__(self, x, y, w, h, lbl, key=None):
        self.rect = pygame.Rect(x, y, w, h); self.label = lbl; self.key = key

    def draw(self, s, fonts, act=False, hov=False, enabled=True):
        bg = UI_ACCENT if act else (UI_HOVER if hov and enabled else UI_PANEL2)
        fc = (0, 0, 0) if act else (UI_TEXT if enabled else UI_DIM)
        pygame.draw.rect(s, bg,        self.rect, border_radius=5)
        pygame.draw.rect(s, UI_BORDER, self.rect, 1, border_radius=5)
        t = fonts['small'].render(self.label, True, fc)
        s.blit(t, t.get_rect(center=self.rect.center))


class TextBox:
    """Single-line text input; disabled while a sort is running."""

    def __init__(self, x, y, w, h, placeholder=""):
        self.rect = pygame.Rect(x, y, w, h)
        self.text = ""
        self.placeholder = placeholder
        self.focus = False

    def handle(self, ev):
        """Returns True when Enter is pressed."""
        if ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            self.focus = self.rect.collidepoint(ev.pos)
        elif ev.type == pygame.KEYDOWN and self.focus:
            if ev.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                return True
            if ev.key == pygame.K_BACKSPACE:
                self.text = self.text[:-1]
        elif ev.type == pygame.TEXTINPUT and self.focus:
            self.text += ev.text
        return False

    def draw(self, s, fonts, enabled=True):
        pygame.draw.rect(s, UI_PANEL, self.rect, border_radius=5)
        br = UI_ACCENT if self.focus and enabled else UI_BORDER
        pygame.draw.rect(s, br, self.rect, 1, border_radius=5)
        if self.text:
            t = fonts['mono'].render(self.text, True, UI_TEXT if enabled else UI_DIM)
        else:
            t = fonts['mono'].render(self.placeholder, True, UI_DIM)
        s.blit(t, (self.rect.x + 8, self.rect.centery - t.get_height() // 2))

# ============================================================
# ========================= WINDOW ===========================
# ============================================================

def build_fonts():
    def tf(names, sz):
        for n in names:
            try: return pygame.font.SysFont(n, sz)
            except (OSError, pygame.error): pass
        return pygame.font.SysFont(None, sz)
    mono = ["Consolas", "Courier New", "Lucida Console"]
    sans = ["Segoe UI", "Tahoma", "Arial"]
    return dict(title=tf(mono, 26), mid=tf(sans, 17), small=tf(sans, 14), mono=tf(mono, 16))


class Visualizer:
    def __init__(self, screen, fonts, settings: Settings, controller: SortController, tones=None):
        self.screen   = screen
        self.fonts    = fonts
        self.settings = settings
        self.ctl      = controller
        self.tones    = tones
        self.msg      = ""

        w, h = settings.window_width, settings.window_height
        self.input = TextBox(PAD, INPUT_Y, w - 2*PAD - 110, BTN_H, "Enter numbers, e.g. 5,3,1")
        self.input.text = controller.text
        self.submit_btn = SmBtn(w - PAD - 100, INPUT_Y, 100, BTN_H, "Submit")
        self.bars_area = pygame.Rect(PAD, BARS_TOP, w - 2*PAD, h - BARS_TOP - FOOTER_H)
        self._build_btns()

    def _build_btns(self):
        w = self.settings.window_width
        y = self.bars_area.bottom + 12
        labels = [(nm, ky) for nm, ky in algorithms.ALGORITHMS] + [("Stop", "stop"), ("Reset", "reset")]
        bw = (w - 2*PAD - (len(labels) - 1) * BTN_GAP) // len(labels)
        self.btns = [SmBtn(PAD + i*(bw + BTN_GAP), y, bw, BTN_H, nm, ky)
                     for i, (nm, ky) in enumerate(labels)]

    def _enabled(self, key):
        if key == "reset": return True
        if key == "stop":  return self.ctl.sorting
        return not self.ctl.sorting

    def handle(self, ev, now_ms):
        if not self.ctl.sorting and self.input.handle(ev):
            self.ctl.submit(self.input.text)
        if ev.type == pygame.KEYDOWN and ev.key == pygame.K_SPACE and not self.input.focus:
            # Space starts the preselected algorithm
            self.ctl.start(now_ms=now_ms)
            return
        if ev.type != pygame.MOUSEBUTTONDOWN or ev.button != 1:
            return
        if self.submit_btn.rect.collidepoint(ev.pos) and not self.ctl.sorting:
            self.ctl.submit(self.input.text)
            return
        for b in self.btns:
            if not b.rect.collidepoint(ev.pos) or not self._enabled(b.key):
                continue
            if b.key == "stop":
                self.ctl.stop()
            elif b.key == "reset":
                self.ctl.reset(self.input.text)
            else:
                self.ctl.start(b.key, now_ms)

    def update(self, now_ms):
        ev = self.ctl.tick(now_ms)
        if ev is not None and self.tones and ev.indices and ev.values:
            self.tones.trigger(ev.values[ev.indices[0]], min(ev.values), max(ev.values))

    def draw(self):
        s  = self.screen
        mp = pygame.mouse.get_pos()
        s.fill(UI_BG)
        s.blit(self.fonts['title'].render("Sorting Visualizer", True, UI_TEXT), (PAD, 16))

        sorting = self.ctl.sorting
        self.input.draw(s, self.fonts, enabled=not sorting)
        self.submit_btn.draw(s, self.fonts, False, self.submit_btn.rect.collidepoint(mp), not sorting)

        pygame.draw.rect(s, UI_PANEL, self.bars_area.inflate(12, 12), border_radius=7)
        active = set(self.ctl.active)
        for i, r in enumerate(bar_rects(self.ctl.values, self.settings, self.bars_area)):
            pygame.draw.rect(s, ACTIVE_COLOR if i in active else BAR_COLOR, r)

        for b in self.btns:
            b.draw(s, self.fonts, b.key == self.ctl.selected,
                   b.rect.collidepoint(mp), self._enabled(b.key))

        y = self.btns[0].rect.bottom + 12
        state = self.ctl.state
        label = f"{state.value.upper()}"
        if self.ctl.run is not None:
            label += f"  -  {algorithms.display_name(self.ctl.run.algorithm)}  -  {self.ctl.run.steps} steps"
        s.blit(self.fonts['small'].render(label, True, STATE_COLORS[state]), (PAD, y))
        for line in wrap_text(self.ctl.description, self.fonts['mid'], self.settings.window_width - 2*PAD):
            y += 22
            s.blit(self.fonts['mid'].render(line, True, UI_TEXT), (PAD, y))
        if self.ctl.error:
            s.blit(self.fonts['small'].render(self.ctl.error, True, STATE_COLORS[RunState.FAILED]),
                   (PAD, self.settings.window_height - 24))
        elif self.msg:
            s.blit(self.fonts['small'].render(self.msg, True, UI_SUBTEXT),
                   (PAD, self.settings.window_height - 24))
        pygame.display.flip()


def run_window(settings: Settings, controller: SortController, msg=""):
    pygame.init()
    screen = pygame.display.set_mode((settings.window_width, settings.window_height))
    pygame.display.set_caption("Sorting Visualizer")
    pygame.key.start_text_input()
    tones = None
    if settings.sound:
        tones = ToneEngine(settings.freq_low, settings.freq_high)
        tones.start()
    view = Visualizer(screen, build_fonts(), settings, controller, tones)
    view.msg = msg
    clock = pygame.time.Clock()
    logger.info("window opened (%dx%d)", settings.window_width, settings.window_height)
    try:
        while True:
            clock.tick(settings.fps)
            now = pygame.time.get_ticks()
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    return
                if ev.type == pygame.KEYDOWN and ev.key == pygame.K_ESCAPE:
                    if controller.sorting: controller.stop()
                    else: return
                view.handle(ev, now)
            view.update(now)
            view.draw()
    finally:
        controller.stop()
        if tones: tones.stop()
        pygame.quit()
