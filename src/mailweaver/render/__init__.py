from mailweaver.render.renderer import MjmlCliRenderer, Renderer, load_cli_renderer, renderer_key

__all__ = ["MjmlCliRenderer", "Renderer", "load_cli_renderer", "renderer_key"]
