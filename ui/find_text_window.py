# ui/find_text_window.py

"""Window for finding files that contain a piece of text."""
import logging
import tkinter as tk
from tkinter import ttk, messagebox
from typing import Optional

from core.config import Config
from core.exceptions import EmptyPatternError, PatternEncodingError
from core.file_tree import FileNode
from core.match_list import MatchList, MatchListListener
from core.progress import MODE_INDETERMINATE, ProgressCounter
from core.search_controller import SearchController
from core.search_task import SearchTask, TaskState
from utils.file_utils import available_encodings, format_size, get_display_path
from utils.i18n import translator as t
from utils.platform_utils import (
    FileOperationError, calculate_window_geometry, get_screen_geometry, open_file_or_folder
)

logger = logging.getLogger(__name__)

PUMP_INTERVAL_MS = 50
PUMP_BATCH = 500


class _ResultListAdapter(MatchListListener):
    """Mirrors MatchList additions into the Listbox."""

    def __init__(self, window: 'FindTextWindow'):
        self.window = window

    def interval_added(self, source: MatchList, index0: int, index1: int):
        for index in range(index0, index1 + 1):
            self.window.add_result_row(source.get(index))


class FindTextWindow:
    """Search window bound to one folder or file of the tree."""

    def __init__(self, folder: FileNode, config: Optional[Config] = None, parent=None):
        self.folder = folder
        self.config = config or Config()
        self.min_text_length = self.config.get('min_text_length', 3)

        self.root = tk.Toplevel(parent) if parent else tk.Tk()
        self.root.title(f"{t.get('app_title')} - {folder.name}")

        saved_geometry = self.config.get('window_geometry')
        if saved_geometry:
            self.root.geometry(saved_geometry)
        else:
            screen_width, screen_height = get_screen_geometry(self.root)
            self.root.geometry(calculate_window_geometry(screen_width, screen_height))
        self.root.protocol("WM_DELETE_WINDOW", self.on_closing)

        self.controller = SearchController(settings=self.config.scan_settings(),
                                           default_encoding=self.config.get('encoding', 'UTF-8'))
        self.controller.on_new_search = self.on_new_search
        self.controller.on_first_match = self.on_first_match
        self.controller.on_finished = self.on_search_finished

        self.results: Optional[MatchList] = None
        self.progress: Optional[ProgressCounter] = None
        self._result_adapter = _ResultListAdapter(self)
        self._pump_id = None

        self.setup_ui()
        self.update_state_for_text()
        self._schedule_pump()

    def setup_ui(self):
        """Setup the search form, progress bar and result list."""
        main_frame = ttk.Frame(self.root, padding=10)
        main_frame.pack(fill=tk.BOTH, expand=True)

        # Search text
        text_frame = ttk.Frame(main_frame)
        text_frame.pack(fill=tk.X)
        ttk.Label(text_frame, text=t.get('text_to_search')).pack(side=tk.LEFT)
        self.text_var = tk.StringVar()
        self.text_var.trace_add('write', lambda *_: self.update_state_for_text())
        self.text_entry = ttk.Entry(text_frame, textvariable=self.text_var)
        self.text_entry.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=(5, 5))
        self.text_entry.bind('<Return>', self.on_enter_pressed)
        self.find_button = ttk.Button(text_frame, text=t.get('find_button'), command=self.perform_search)
        self.find_button.pack(side=tk.RIGHT)

        # Charset
        charset_frame = ttk.Frame(main_frame)
        charset_frame.pack(fill=tk.X, pady=(5, 5))
        ttk.Label(charset_frame, text=t.get('charset')).pack(side=tk.LEFT)
        self.charset_var = tk.StringVar(value=self.controller.last_encoding)
        self.charset_combo = ttk.Combobox(charset_frame, textvariable=self.charset_var,
                                          values=available_encodings(), state='readonly', width=20)
        self.charset_combo.pack(side=tk.LEFT, padx=(5, 0))

        # Progress bar
        self.progress_bar = ttk.Progressbar(main_frame, mode='determinate')
        self.progress_bar.pack(fill=tk.X, pady=(0, 5))

        # Results list
        results_frame = ttk.LabelFrame(main_frame, text=t.get('search_results'), padding=5)
        results_frame.pack(fill=tk.BOTH, expand=True)

        self.result_list = tk.Listbox(results_frame, selectmode=tk.SINGLE, activestyle='dotbox')
        v_scrollbar = ttk.Scrollbar(results_frame, orient=tk.VERTICAL, command=self.result_list.yview)
        h_scrollbar = ttk.Scrollbar(results_frame, orient=tk.HORIZONTAL, command=self.result_list.xview)
        self.result_list.configure(yscrollcommand=v_scrollbar.set, xscrollcommand=h_scrollbar.set)

        v_scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
        h_scrollbar.pack(side=tk.BOTTOM, fill=tk.X)
        self.result_list.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)

        self.result_list.bind('<Double-Button-1>', self.on_result_double_click)
        self.result_list.bind('<Button-3>', self.on_result_right_click)

        # Status bar
        self.status_var = tk.StringVar()
        ttk.Label(main_frame, textvariable=self.status_var, foreground='gray').pack(fill=tk.X, pady=(5, 0))

        self.text_entry.focus_set()

    def update_state_for_text(self):
        """Enable the find button only for long enough text."""
        if self.controller.is_searching:
            return
        if len(self.text_var.get()) >= self.min_text_length:
            self.find_button.state(['!disabled'])
            self.status_var.set("")
        else:
            self.find_button.state(['disabled'])
            self.status_var.set(t.get('ready_status', self.min_text_length))

    def set_controls_enabled(self, enabled: bool):
        if enabled:
            self.text_entry.state(['!disabled'])
            self.charset_combo.state(['!disabled', 'readonly'])
            self.update_state_for_text()
        else:
            self.text_entry.state(['disabled'])
            self.charset_combo.state(['disabled'])
            self.find_button.state(['disabled'])

    def on_enter_pressed(self, event):
        if len(self.text_var.get()) >= self.min_text_length and not self.controller.is_searching:
            self.perform_search()
        return 'break'

    def perform_search(self):
        """Start a new search over the window's folder."""
        text = self.text_var.get()
        if len(text) < self.min_text_length:
            messagebox.showerror(t.get('error'), t.get('text_too_short', self.min_text_length))
            return

        self.set_controls_enabled(False)
        self.result_list.selection_clear(0, tk.END)

        encoding = self.charset_var.get()
        try:
            self.controller.start_search([self.folder], text, encoding)
        except (PatternEncodingError, EmptyPatternError) as e:
            logger.info("Search not started: %s", e)
            self.set_controls_enabled(True)
            messagebox.showerror(t.get('error'), t.get('encoding_error', e))
            return

        self.config.set('encoding', encoding)
        self.status_var.set(t.get('searching_status', get_display_path(self.folder.path)))

    # --- Controller callbacks, all run on the Tk thread ---

    def on_new_search(self, results: MatchList, progress: ProgressCounter):
        if self.results is not None:
            self.results.unobserve(self._result_adapter)
        if self.progress is not None:
            self.progress.unobserve(self.render_progress)

        self.results = results
        self.progress = progress
        self.result_list.delete(0, tk.END)
        results.observe(self._result_adapter)
        progress.observe(self.render_progress)
        self.render_progress(progress)

    def on_first_match(self, index: int):
        self.result_list.selection_set(index)
        self.result_list.activate(index)

    def on_search_finished(self, task: SearchTask):
        count = self.results.size() if self.results is not None else 0
        if task.state == TaskState.COMPLETED:
            self.status_var.set(t.get('found_status', count))
        else:
            self.status_var.set(t.get('cancelled_status', count))
        self.set_controls_enabled(True)
        self.text_entry.focus_set()

    def add_result_row(self, node: FileNode):
        self.result_list.insert(tk.END, f"{get_display_path(node.path)}  ({format_size(node.size())})")

    def render_progress(self, progress: ProgressCounter):
        """Show a ProgressCounter on the ttk progress bar."""
        if progress.mode == MODE_INDETERMINATE:
            if str(self.progress_bar.cget('mode')) != 'indeterminate':
                self.progress_bar.configure(mode='indeterminate')
                self.progress_bar.start()
            self.progress_bar.state(['!disabled'])
            return

        if str(self.progress_bar.cget('mode')) == 'indeterminate':
            self.progress_bar.stop()
            self.progress_bar.configure(mode='determinate')

        maximum = max(1, progress.maximum)
        self.progress_bar.configure(maximum=maximum)
        if progress.is_done:
            self.progress_bar.configure(value=maximum)
            self.progress_bar.state(['disabled'])
        else:
            self.progress_bar.configure(value=progress.value)
            self.progress_bar.state(['!disabled'])

    # --- Queue pumping ---

    def _schedule_pump(self):
        self._pump_id = self.root.after(PUMP_INTERVAL_MS, self._pump)

    def _pump(self):
        """Apply worker posts on the Tk thread."""
        self.controller.process_pending(PUMP_BATCH)
        # Drain a backlog quickly, otherwise poll at the normal rate
        delay = 1 if self.controller.channel.has_pending() else PUMP_INTERVAL_MS
        self._pump_id = self.root.after(delay, self._pump)

    # --- Result actions ---

    def get_selected_result(self) -> Optional[FileNode]:
        selection = self.result_list.curselection()
        if not selection or self.results is None:
            return None
        try:
            return self.results.get(selection[0])
        except IndexError:
            return None

    def on_result_double_click(self, event):
        self.open_result(open_folder=False)

    def on_result_right_click(self, event):
        index = self.result_list.nearest(event.y)
        if index < 0:
            return
        self.result_list.selection_clear(0, tk.END)
        self.result_list.selection_set(index)

        menu = tk.Menu(self.root, tearoff=0)
        menu.add_command(label=t.get('open_file'), command=lambda: self.open_result(open_folder=False))
        menu.add_command(label=t.get('open_folder'), command=lambda: self.open_result(open_folder=True))
        menu.add_command(label=t.get('copy_path'), command=self.copy_result_path)
        try:
            menu.tk_popup(event.x_root, event.y_root)
        finally:
            menu.grab_release()

    def open_result(self, open_folder: bool = False):
        node = self.get_selected_result()
        if node is None:
            return
        try:
            open_file_or_folder(node.path, open_folder=open_folder)
        except FileNotFoundError:
            messagebox.showerror(t.get('error'), t.get('file_not_found', node.path))
        except FileOperationError as e:
            messagebox.showerror(t.get('error'), str(e))

    def copy_result_path(self):
        node = self.get_selected_result()
        if node is None:
            return
        self.root.clipboard_clear()
        self.root.clipboard_append(str(node.path))
        self.status_var.set(t.get('path_copied', node.name))

    def dispose(self):
        """Stop any running search."""
        self.controller.dispose()

    def on_closing(self):
        """Handle window closing."""
        self.dispose()
        if self._pump_id is not None:
            self.root.after_cancel(self._pump_id)
            self._pump_id = None
        self.config.set('window_geometry', self.root.geometry())
        self.config.set('encoding', self.charset_var.get())
        self.config.save_config()
        self.root.destroy()

    def run(self):
        """Run the window's event loop."""
        self.root.mainloop()
