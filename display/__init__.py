from display.overlay import draw_face_box, draw_face_panel, face_panel_lines

__all__ = ["draw_face_box", "draw_face_panel", "face_panel_lines"]
