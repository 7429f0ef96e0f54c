# tower_jumper/game/game.py
import sys, argparse, logging
from pathlib import Path
import pygame
from .config import (
    WIDTH, HEIGHT, FPS, PIXEL_GRID, PIXEL_SLOTS, COLOR_CHOICES, EDITOR_PALETTE_COLORS,
    ASSETS_DIR_NAME, VOLUME_STEP,
)
from .audio import AudioController, load_handles
from .clock import ManualFrameClock
from .customization import CustomizationStore, PixelEditor
from .pixel_art import PixelArtImportError
from .render import FrameRenderer, pixel_sprite, safe_color
from .scores import HighScoreLedger
from .session import GameSession
from .storage import open_store
from .theme import SettingsPanel, Theme, ThemeState

log = logging.getLogger(__name__)

KEY_CODES = {
    pygame.K_LEFT: "ArrowLeft", pygame.K_a: "KeyA",
    pygame.K_RIGHT: "ArrowRight", pygame.K_d: "KeyD",
    pygame.K_SPACE: "Space", pygame.K_ESCAPE: "Escape",
}
# key -> (channel, direction)
VOLUME_KEYS = {
    pygame.K_MINUS: ("music", -1), pygame.K_EQUALS: ("music", 1),
    pygame.K_COMMA: ("sfx", -1), pygame.K_PERIOD: ("sfx", 1),
}
EDITOR_CELL = 16
EDITOR_ORIGIN = ((WIDTH - PIXEL_GRID * EDITOR_CELL) // 2, 70)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Tower Jumper: endless climber")
    p.add_argument("--seed", type=int, default=None,
                   help="Platform layout seed. Omit for a random layout.")
    p.add_argument("--save-file", type=str, default=None,
                   help="JSON save file (default: $TOWER_JUMPER_SAVE or ~/.tower_jumper/save.json)")
    p.add_argument("--theme", choices=[t.value for t in Theme], default=None)
    p.add_argument("--name", type=str, default=None, help="Player name for the high-score table")
    p.add_argument("--slot", type=int, default=None, help="Active pixel-art slot (0-4)")
    p.add_argument("--import-art", type=str, default=None, metavar="JSON",
                   help="Import a pixel-art JSON file into the active slot and exit")
    p.add_argument("--export-art", type=str, default=None, metavar="PATH",
                   help="Export the active slot to PATH (a directory gets a timestamped name) and exit")
    p.add_argument("--mute", action="store_true", help="Mute music and effects for this run")
    p.add_argument("--log-level", default="WARNING")
    return p.parse_args(argv)


def handle_art_commands(args, custom: CustomizationStore) -> bool:
    """Export/import without opening a window. Returns True if one ran."""
    if args.import_art:
        try:
            custom.import_document(Path(args.import_art).read_bytes())
        except (OSError, PixelArtImportError) as e:
            print(f"✗ {e}", file=sys.stderr)
            return True
        custom.set_render_mode("pixel")
        print(f"✓ Imported {args.import_art} into slot {custom.slot()}")
        return True
    if args.export_art:
        out = Path(args.export_art)
        if out.is_dir():
            out = out / custom.export_filename()
        out.write_text(custom.export_json(), encoding="utf-8")
        print(f"✓ Exported slot {custom.slot()} to {out}")
        return True
    return False


def editor_cell_at(pos):
    ox, oy = EDITOR_ORIGIN
    return (pos[0] - ox) // EDITOR_CELL, (pos[1] - oy) // EDITOR_CELL


def adjust_volume(audio: AudioController, key) -> float:
    """One VOLUME_STEP up or down on the channel bound to `key`."""
    channel, direction = VOLUME_KEYS[key]
    if channel == "music":
        return audio.set_music_volume(round(audio.music_volume + direction * VOLUME_STEP, 2))
    return audio.set_sfx_volume(round(audio.sfx_volume + direction * VOLUME_STEP, 2))


def overlay_lines(overlay, scores, audio: AudioController, theme: ThemeState, settings_open: bool):
    lines = [f"Score: {overlay.score}"] if overlay.kind != "start" else []
    if overlay.kind == "game_over":
        lines += [f"{i + 1}. {e.name}  {e.score}" for i, e in enumerate(scores)]
    lines.append(f"SPACE / click: {overlay.button}")
    if settings_open:
        lines.append(f"Settings: T theme ({theme.current.value})  M music  N sfx")
        lines.append(f"-/= music {round(audio.music_volume * 100)}%  ,/. sfx {round(audio.sfx_volume * 100)}%")
    if audio.message:
        lines.append(audio.message)
    return lines


def draw_editor(screen, renderer: FrameRenderer, editor: PixelEditor, custom: CustomizationStore):
    screen.fill((20, 24, 38))
    ox, oy = EDITOR_ORIGIN
    size = PIXEL_GRID * EDITOR_CELL
    screen.blit(pixel_sprite(editor.cells, (size, size)), (ox, oy))
    for i in range(PIXEL_GRID + 1):
        pygame.draw.line(screen, (70, 80, 100), (ox + i * EDITOR_CELL, oy), (ox + i * EDITOR_CELL, oy + size))
        pygame.draw.line(screen, (70, 80, 100), (ox, oy + i * EDITOR_CELL), (ox + size, oy + i * EDITOR_CELL))
    pygame.draw.rect(screen, safe_color(custom.brush_color()), (ox, oy + size + 12, 28, 28))
    font = renderer.font("small")
    hud = [
        f"Slot {custom.slot() + 1}/{PIXEL_SLOTS}   Brush {custom.brush_size()} {custom.brush_shape()}",
        "TAB color  [ ] size  B shape  1-5 slot",
        "X clear  R reset  E close",
    ]
    for i, line in enumerate(hud):
        screen.blit(font.render(line, True, (220, 230, 245)), (40, oy + size + 50 + i * 22))
    screen.blit(renderer.font("small").render("Pixel Editor", True, (255, 255, 255)), (ox, 40))


def run(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))

    store = open_store(args.save_file)
    custom = CustomizationStore(store)
    ledger = HighScoreLedger(store)
    theme = ThemeState(store)

    if args.name is not None:
        ledger.set_player_name(args.name)
    if args.slot is not None:
        custom.set_slot(args.slot)
    if args.theme is not None:
        theme.apply(args.theme, persist=True)
    if handle_art_commands(args, custom):
        return

    pygame.init()
    pygame.display.set_caption("Tower Jumper")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()
    frames = ManualFrameClock()
    renderer = FrameRenderer(theme.visuals)

    assets = Path(__file__).resolve().parents[2] / ASSETS_DIR_NAME
    music, click, land, audio_msg = load_handles(assets)
    audio = AudioController(store, music=music, click=click, land=land)
    audio.message = audio_msg
    if audio_msg:
        log.warning(audio_msg)
    if args.mute:
        audio.music_muted = audio.sfx_muted = True

    def draw(state):
        renderer.set_visuals(session.visuals)
        renderer.draw(screen, state)

    session = GameSession(frames, custom, ledger, theme=theme, audio=audio, render=draw, seed=args.seed)
    panel = SettingsPanel(session)
    editor = PixelEditor(custom, on_change=session.set_player_pixels)
    editing = False

    while True:
        clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.WINDOWFOCUSLOST:
                session.inputs.release_all()
                continue

            if editing:
                if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    editor.begin_stroke(*editor_cell_at(event.pos))
                elif event.type == pygame.MOUSEMOTION:
                    editor.drag_to(*editor_cell_at(event.pos))
                elif event.type == pygame.MOUSEBUTTONUP:
                    editor.end_stroke()
                elif event.type == pygame.KEYDOWN:
                    if event.key in (pygame.K_e, pygame.K_ESCAPE):
                        editing = False
                        panel.close()
                    elif event.key == pygame.K_TAB:
                        cur = custom.brush_color().upper()
                        i = EDITOR_PALETTE_COLORS.index(cur) if cur in EDITOR_PALETTE_COLORS else -1
                        custom.set_brush_color(EDITOR_PALETTE_COLORS[(i + 1) % len(EDITOR_PALETTE_COLORS)])
                    elif event.key == pygame.K_LEFTBRACKET:
                        custom.set_brush_size(custom.brush_size() - 1)
                    elif event.key == pygame.K_RIGHTBRACKET:
                        custom.set_brush_size(custom.brush_size() + 1)
                    elif event.key == pygame.K_b:
                        custom.set_brush_shape("square" if custom.brush_shape() == "circle" else "circle")
                    elif event.key == pygame.K_x:
                        editor.clear()
                    elif event.key == pygame.K_r:
                        editor.reset()
                    elif pygame.K_1 <= event.key <= pygame.K_5:
                        editor.select_slot(event.key - pygame.K_1)
                continue

            if event.type == pygame.KEYDOWN:
                if event.key in KEY_CODES:
                    session.key_down(KEY_CODES[event.key])
                elif event.key == pygame.K_t:
                    theme.cycle()
                elif event.key == pygame.K_s:
                    panel.toggle()
                elif event.key == pygame.K_e:
                    editing = True
                    panel.open()
                    editor.select_slot(custom.slot())
                elif event.key == pygame.K_c:
                    cur = custom.color()
                    i = COLOR_CHOICES.index(cur) if cur in COLOR_CHOICES else -1
                    session.set_player_color(custom.choose_color(COLOR_CHOICES[(i + 1) % len(COLOR_CHOICES)]))
                elif pygame.K_1 <= event.key <= pygame.K_5:
                    session.set_player_pixels(editor.select_design(event.key - pygame.K_1))
                elif event.key == pygame.K_m:
                    audio.toggle_music_mute(game_running=not session.is_paused())
                elif event.key == pygame.K_n:
                    audio.toggle_sfx_mute()
                elif event.key in VOLUME_KEYS:
                    adjust_volume(audio, event.key)
            elif event.type == pygame.KEYUP and event.key in KEY_CODES:
                session.key_up(KEY_CODES[event.key])
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if session.overlay is not None:
                    session.activate_overlay()
                else:
                    session.pointer_down()

        if editing:
            draw_editor(screen, renderer, editor, custom)
            pygame.display.flip()
            continue

        frames.run_frame()

        # Paused/over frames keep the last picture under the overlay.
        if session.overlay is not None:
            renderer.set_visuals(session.visuals)
            if session.state is not None:
                renderer.draw(screen, session.state)
            else:
                screen.fill(session.visuals.background)
            lines = overlay_lines(session.overlay, session.last_scores, audio, theme, panel.is_open)
            renderer.draw_overlay(screen, session.overlay.title, lines)

        pygame.display.flip()


if __name__ == "__main__":
    run()
