"""
Arcade window: draws FrameSnapshots and turns the keyboard into InputState.

Game coordinates grow downward from the top edge; arcade's grow upward, so
every y is flipped on the way out.
"""

from __future__ import annotations

from typing import Optional

import arcade

from .clock import FrameLoop
from .session import FrameSnapshot, InputState


class DogfightWindow(arcade.Window):
    """Arcade window for the daily dogfight"""

    def __init__(self, width: int, height: int, loop: Optional[FrameLoop] = None):
        super().__init__(width, height, "Daily Dogfight")
        self.loop = loop
        self.controls = InputState()
        self.snapshot: Optional[FrameSnapshot] = None

        # Colors
        self.BG = (4, 20, 38)
        self.PLAYER_C = (255, 216, 155)
        self.MISSILE_C = (255, 230, 168)
        self.ENEMY_C = (255, 143, 143)
        self.HUD_BG = (30, 42, 58)
        self.HUD_C = (207, 239, 243)
        self.background_color = self.BG

    def _sy(self, y: float) -> float:
        return self.height - y

    def show(self, snapshot: FrameSnapshot):
        """Draw one frame outside arcade.run (env-driven rendering)"""
        self.snapshot = snapshot
        self.dispatch_events()
        self.on_draw()
        self.flip()

    # ----------------------------
    # Interactive play
    # ----------------------------

    def on_update(self, delta_time: float):
        if self.loop is None:
            return
        if self.loop.session.running:
            self.loop.tick(self.controls)
        self.snapshot = self.loop.session.snapshot()

    def on_key_press(self, symbol: int, modifiers: int):
        if symbol in (arcade.key.LEFT, arcade.key.A):
            self.controls.steer_left = True
            self.controls.steer_right = False
        elif symbol in (arcade.key.RIGHT, arcade.key.D):
            self.controls.steer_right = True
            self.controls.steer_left = False
        elif symbol == arcade.key.SPACE:
            self.controls.firing = True
        elif symbol == arcade.key.ESCAPE:
            self.close()

    def on_key_release(self, symbol: int, modifiers: int):
        if symbol in (arcade.key.LEFT, arcade.key.A):
            self.controls.steer_left = False
        elif symbol in (arcade.key.RIGHT, arcade.key.D):
            self.controls.steer_right = False
        elif symbol == arcade.key.SPACE:
            self.controls.firing = False

    # ----------------------------
    # Drawing
    # ----------------------------

    def on_draw(self):
        self.clear()
        snap = self.snapshot
        if snap is None:
            return

        # Missiles
        for x, y, r in snap.missiles:
            arcade.draw_circle_filled(x, self._sy(y), r, self.MISSILE_C)

        # Enemies: diamond + kind initial
        for kind, x, y, r in snap.enemies:
            sy = self._sy(y)
            arcade.draw_polygon_filled(
                [(x, sy + r), (x + r, sy), (x, sy - r), (x - r, sy)], self.ENEMY_C
            )
            arcade.draw_text(kind[0].upper(), x - 4, sy - 4, arcade.color.WHITE, 10)

        # Player: triangle pointing up
        px, py, _ = snap.player
        sy = self._sy(py)
        arcade.draw_triangle_filled(px, sy + 18, px + 12, sy - 12, px - 12, sy - 12, self.PLAYER_C)

        # HUD
        top = self.height - 8
        arcade.draw_lrbt_rectangle_filled(8, self.width - 8, top - 44, top, self.HUD_BG)
        arcade.draw_text(f"Time left: {snap.time_left:.2f}s", 18, top - 20, self.HUD_C, 14)
        arcade.draw_text(f"Enemies: {snap.enemy_count}", 18, top - 38, self.HUD_C, 14)

        best = snap.record.best_time
        best_txt = f"{best:.2f}s" if best else "-"
        arcade.draw_text(
            f"Best: {best_txt}  Streak: {snap.record.streak}",
            self.width - 200, top - 20, self.HUD_C, 12,
        )

        if snap.result is not None:
            arcade.draw_text(
                snap.result.message,
                self.width / 2, self.height / 2, self.HUD_C, 18,
                anchor_x="center",
            )
