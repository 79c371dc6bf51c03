"""
Image Archive Network - GUI Application
Live force layout on a tkinter canvas: theme filter bar, hover highlighting,
drag to reposition, click to open the image source, scroll parallax.
"""
import tkinter as tk
from tkinter import ttk, scrolledtext
import argparse
import os
import sys
import threading
import time
import traceback

from archive_data import DataLoadError, load_archive
from archive_graph import ArchiveGraph
from interaction_state import (Activate, DragEnd, DragMove, DragStart, OTHER, PointerEnter,
                               PointerLeave, SELF)
from network_config import NetworkConfig

TICK_MS = 16
CLICK_SLOP = 3
SCROLL_STEP = 40

BG_COLOR = '#0f1320'
FG_COLOR = '#e8ecf4'
NODE_FILL = '#1c2333'


def blend(color: str, background: str, opacity: float) -> str:
    """Mix a hex color toward the background; the canvas has no alpha"""
    c = [int(color[i:i + 2], 16) for i in (1, 3, 5)]
    b = [int(background[i:i + 2], 16) for i in (1, 3, 5)]
    mixed = [round(cv * opacity + bv * (1 - opacity)) for cv, bv in zip(c, b)]
    return '#%02x%02x%02x' % tuple(mixed)


class ArchiveNetworkGUI:
    def __init__(self, root, data_location, config=None, seed=None):
        self.root = root
        self.root.title("Image Archive - Conceptual Network")
        self.root.geometry("1280x900")
        self.root.minsize(800, 600)

        self.data_location = data_location
        self.config = config or NetworkConfig()
        self.seed = seed
        self.graph = None
        self.load_failed = False

        # Canvas bookkeeping for the current projection
        self.node_items = {}
        self.image_items = {}
        self.link_items = []
        self.node_scale = {}
        self.filter_buttons = {}
        self._photos = {}
        self.scroll_y = 0
        self._press = None
        self._dragging = False

        self.style = ttk.Style()
        self.style.theme_use('clam')

        self.create_widgets()
        self.apply_theme()

    def create_widgets(self):
        """Create GUI widgets"""
        main_container = ttk.Frame(self.root, padding="10")
        main_container.pack(fill='both', expand=True)

        header_frame = ttk.Frame(main_container)
        header_frame.pack(fill='x', pady=(0, 8))

        ttk.Label(header_frame, text="Image Archive - Conceptual Network",
                 font=('Segoe UI', 14, 'bold')).pack(anchor='w')
        ttk.Label(header_frame, text="Images connect when they share a theme or a mood. Hover to trace, drag to rearrange, click to open.",
                 font=('Segoe UI', 9), foreground='#8a93a8').pack(anchor='w', pady=(3, 0))

        # Filled with one button per theme once the data arrives
        self.filter_bar = ttk.Frame(main_container)
        self.filter_bar.pack(fill='x', pady=(0, 8))

        self.canvas = tk.Canvas(main_container, highlightthickness=0, bg=BG_COLOR)
        self.canvas.pack(fill='both', expand=True)

        self.canvas.tag_bind('node', '<Enter>', self.on_node_enter)
        self.canvas.tag_bind('node', '<Leave>', self.on_node_leave)
        self.canvas.tag_bind('node', '<ButtonPress-1>', self.on_node_press)
        self.canvas.bind('<B1-Motion>', self.on_pointer_drag)
        self.canvas.bind('<ButtonRelease-1>', self.on_pointer_release)
        self.canvas.bind('<Configure>', self.on_resize)
        self.canvas.bind('<MouseWheel>', self.on_mouse_wheel)
        self.canvas.bind('<Button-4>', lambda e: self.scroll_by(-SCROLL_STEP))
        self.canvas.bind('<Button-5>', lambda e: self.scroll_by(SCROLL_STEP))

        status_frame = ttk.Frame(main_container)
        status_frame.pack(fill='x', pady=(8, 0))

        self.status_var = tk.StringVar(value="Loading archive...")
        ttk.Label(status_frame, textvariable=self.status_var,
                 font=('Segoe UI', 9, 'bold')).pack(side='left')

        self.stats_var = tk.StringVar(value="")
        ttk.Label(status_frame, textvariable=self.stats_var,
                 font=('Segoe UI', 9)).pack(side='right')

        self.log_text = scrolledtext.ScrolledText(main_container, height=4,
                                                  font=('Consolas', 9), wrap=tk.WORD)
        self.log_text.pack(fill='x', pady=(8, 0))

    def apply_theme(self):
        """Apply the dark theme to GUI elements"""
        self.root.configure(bg=BG_COLOR)
        self.style.configure('TFrame', background=BG_COLOR)
        self.style.configure('TLabel', background=BG_COLOR, foreground=FG_COLOR)
        self.style.configure('TButton', background='#262e42', foreground=FG_COLOR, bordercolor='#3a4258')
        self.style.configure('Active.TButton', background=self.config.line_color, foreground='#ffffff')
        self.style.map('TButton', background=[('active', '#333c55')])
        self.log_text.configure(bg='#0a0d16', fg='#b8c0d4', insertbackground=FG_COLOR)

    def log(self, message):
        """Add message to log"""
        timestamp = time.strftime("%H:%M:%S")
        self.log_text.insert(tk.END, f"[{timestamp}] {message}\n")
        self.log_text.see(tk.END)

    # -- loading -------------------------------------------------------------

    def start_loading(self):
        """Load the archive in a background thread"""
        self.log(f"[Data] Loading {self.data_location}")
        thread = threading.Thread(target=self.load_data)
        thread.daemon = True
        thread.start()

    def load_data(self):
        try:
            data = load_archive(self.data_location)
        except DataLoadError as e:
            error_msg = str(e)
            self.root.after(0, lambda: self.show_load_error(error_msg))
            return
        self.root.after(0, lambda: self.data_loaded(data))

    def show_load_error(self, error_msg):
        """Static error state; no partial graph"""
        self.load_failed = True
        self.log(f"[Error] {error_msg}")
        self.status_var.set("Failed to load data")
        self.canvas.delete('all')
        self.canvas.create_text(32, 32, anchor='nw', fill=FG_COLOR, font=('Segoe UI', 11),
                                text="Failed to load data. Check the archive document and the log.")

    def data_loaded(self, data):
        # An unmapped canvas reports 1x1
        width = self.canvas.winfo_width() if self.canvas.winfo_width() > 1 else 0
        height = self.canvas.winfo_height() if self.canvas.winfo_height() > 1 else 0
        self.graph = ArchiveGraph(data, self.config, width=width, height=height, seed=self.seed)
        self.graph.add_tick_listener(self.on_tick)

        self.log(f"[Data] Loaded {len(data)} images")
        if data.skipped:
            self.log(f"[Data] Skipped {data.skipped} malformed entries")

        self.build_filter_bar()
        self.draw_scene()
        self.root.after(TICK_MS, self.tick_loop)

    def build_filter_bar(self):
        for child in self.filter_bar.winfo_children():
            child.destroy()
        self.filter_buttons = {}
        for tag in [""] + self.graph.filters:
            btn = ttk.Button(self.filter_bar, text=tag or "All",
                             command=lambda t=tag: self.select_filter(t))
            btn.pack(side='left', padx=(0, 5))
            self.filter_buttons[tag] = btn
        self.mark_active_filter()

    def mark_active_filter(self):
        for tag, btn in self.filter_buttons.items():
            btn.configure(style='Active.TButton' if tag == self.graph.active_filter else 'TButton')

    # -- drawing -------------------------------------------------------------

    def _photo_for(self, image_path):
        """PhotoImage for a local PNG/GIF, or None to fall back to a plain disc"""
        if image_path in self._photos:
            return self._photos[image_path]
        photo = None
        if not self.data_location.startswith(('http://', 'https://')):
            full_path = os.path.join(os.path.dirname(os.path.abspath(self.data_location)), image_path)
            if os.path.exists(full_path):
                try:
                    photo = tk.PhotoImage(file=full_path)
                    factor = max(1, photo.width() // int(self.config.node_radius * 2))
                    if factor > 1:
                        photo = photo.subsample(factor)
                except tk.TclError:
                    photo = None
        self._photos[image_path] = photo
        return photo

    def draw_scene(self):
        """Create canvas items for the current projection"""
        self.canvas.delete('all')
        self.node_items = {}
        self.image_items = {}
        self.link_items = []
        self.node_scale = {node.id: 1.0 for node in self.graph.nodes}

        for _ in self.graph.links:
            self.link_items.append(self.canvas.create_line(0, 0, 0, 0, width=1.5,
                                                           fill=self.config.line_color, tags=('link',)))

        for node in self.graph.nodes:
            photo = self._photo_for(node.image)
            if photo is not None:
                self.image_items[node.id] = self.canvas.create_image(0, 0, image=photo,
                                                                     tags=('node', f'node:{node.id}'))
            self.node_items[node.id] = self.canvas.create_oval(
                0, 0, 0, 0,
                fill='' if photo is not None else NODE_FILL,
                outline=self.config.line_color, width=2,
                tags=('node', f'node:{node.id}'),
            )

        summary = self.graph.summary()
        self.stats_var.set(f"{summary['nodes']} images | {summary['links']} links | "
                           f"{summary['components']} components | density {summary['density']:.2%}")
        self.status_var.set(f"Filter: {self.graph.active_filter or 'All'}")
        self.apply_highlight(self.graph.highlight())
        self.on_tick(self.graph.layout.frame())

    def on_tick(self, frame):
        ox, oy = self.graph.viewport.offset
        radius = self.config.node_radius
        for item, (_, _, (x1, y1), (x2, y2)) in zip(self.link_items, frame.segments):
            self.canvas.coords(item, x1 + ox, y1 + oy, x2 + ox, y2 + oy)
        for node_id, (x, y) in frame.positions.items():
            r = radius * self.node_scale.get(node_id, 1.0)
            self.canvas.coords(self.node_items[node_id], x + ox - r, y + oy - r, x + ox + r, y + oy + r)
            if node_id in self.image_items:
                self.canvas.coords(self.image_items[node_id], x + ox, y + oy)

    def apply_highlight(self, highlight):
        for node_id, style in highlight.nodes.items():
            self.node_scale[node_id] = style.scale
            item = self.node_items[node_id]
            outline = self.config.line_color_hover if style.classification == SELF else self.config.line_color
            self.canvas.itemconfigure(item, outline=blend(outline, BG_COLOR, style.opacity))
            if node_id in self.image_items:
                # Dim images with a stippled veil
                if style.classification == OTHER:
                    self.canvas.itemconfigure(item, fill=BG_COLOR, stipple='gray50')
                else:
                    self.canvas.itemconfigure(item, fill='', stipple='')
            else:
                self.canvas.itemconfigure(item, fill=blend(NODE_FILL, BG_COLOR, style.opacity))

        for item, (_, style) in zip(self.link_items, highlight.links):
            self.canvas.itemconfigure(item, fill=blend(style.color, BG_COLOR, style.opacity))

        if highlight.idle:
            self.status_var.set(f"Filter: {self.graph.active_filter or 'All'}")
        else:
            node = self.graph.layout.node(highlight.hovered_id)
            self.status_var.set(f"{node.display_name} - {len(highlight.connected)} connected")

        self.on_tick(self.graph.layout.frame())

    def tick_loop(self):
        """Drive the simulation; always steps whichever layout is current"""
        if self.graph is None:
            return
        if self.graph.layout.active:
            self.graph.layout.step()
        self.root.after(TICK_MS, self.tick_loop)

    # -- events --------------------------------------------------------------

    def _event_node_id(self):
        for tag in self.canvas.gettags('current'):
            if tag.startswith('node:'):
                return tag[len('node:'):]
        return None

    def _scene_point(self, event):
        ox, oy = self.graph.viewport.offset
        return (self.canvas.canvasx(event.x) - ox, self.canvas.canvasy(event.y) - oy)

    def dispatch(self, event):
        highlight = self.graph.dispatch(event)
        if highlight is not None:
            self.apply_highlight(highlight)

    def on_node_enter(self, event):
        node_id = self._event_node_id()
        if node_id is not None and not self._dragging:
            self.dispatch(PointerEnter(node_id))

    def on_node_leave(self, event):
        if not self._dragging:
            self.dispatch(PointerLeave(self._event_node_id()))

    def on_node_press(self, event):
        node_id = self._event_node_id()
        if node_id is None:
            return
        self._press = (node_id, event.x, event.y)
        self._dragging = False

    def on_pointer_drag(self, event):
        if self._press is None:
            return
        node_id, px, py = self._press
        if not self._dragging:
            if abs(event.x - px) < CLICK_SLOP and abs(event.y - py) < CLICK_SLOP:
                return
            self._dragging = True
            self.dispatch(DragStart(node_id, self._scene_point(event)))
        else:
            self.dispatch(DragMove(self._scene_point(event)))

    def on_pointer_release(self, event):
        if self._press is None:
            return
        node_id = self._press[0]
        if self._dragging:
            self.dispatch(DragEnd())
        else:
            self.dispatch(Activate(node_id))
            self.log(f"[Action] Activated {node_id}")
        self._press = None
        self._dragging = False

    def on_resize(self, event):
        if self.graph is None:
            return
        self.graph.resize(event.width, event.height)

    def on_mouse_wheel(self, event):
        self.scroll_by(-SCROLL_STEP if event.delta > 0 else SCROLL_STEP)

    def scroll_by(self, amount):
        if self.graph is None:
            return
        self.scroll_y = max(0, self.scroll_y + amount)
        self.graph.scroll(self.scroll_y)
        self.on_tick(self.graph.layout.frame())

    def select_filter(self, tag):
        if self.graph is None:
            return
        self._press = None
        self._dragging = False
        projection = self.graph.rebuild_for_filter(tag)
        self.log(f"[Filter] {tag or 'All'}: {len(projection.nodes)} images, {len(projection.links)} links")
        self.mark_active_filter()
        self.draw_scene()


def run_gui(data_location, config=None, seed=None):
    """Open the window and block until it closes"""
    root = tk.Tk()
    app = ArchiveNetworkGUI(root, data_location, config, seed)
    root.after(100, app.start_loading)
    root.mainloop()
    if app.graph is not None:
        app.graph.dispose()
    return 1 if app.load_failed else 0


def main():
    parser = argparse.ArgumentParser(description='Interactive image archive network')
    parser.add_argument('--data', default='data.json', help='Archive document: local path or http(s) URL')
    parser.add_argument('--config', help='JSON file with layout and styling overrides')
    args = parser.parse_args()

    try:
        config = NetworkConfig.from_file(args.config) if args.config else NetworkConfig()
        sys.exit(run_gui(args.data, config))
    except (OSError, ValueError, tk.TclError) as e:
        # Show error in a message box if GUI fails to start
        import tkinter.messagebox as mb
        error_msg = f"Failed to start application:\n\n{str(e)}\n\n{traceback.format_exc()}"
        try:
            root = tk.Tk()
            root.withdraw()
            mb.showerror("Startup Error", error_msg)
        except tk.TclError:
            # No display at all
            with open("error_log.txt", "w") as f:
                f.write(error_msg)
        sys.exit(1)


if __name__ == "__main__":
    main()
