"""Interface Tkinter principale."""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
import sys
import tkinter as tk
import webbrowser
from tkinter import ttk
from typing import Any, Coroutine

import sv_ttk

from shortlink.presenter import ShortenerPresenter
from shortlink.state import ViewSnapshot

logger = logging.getLogger(__name__)

ACCENT_COLOR = "#3B82F6"
BACKGROUND_COLOR = "#121212"
CARD_COLOR = "#181818"
STATUS_NEUTRAL_COLOR = "#B3B3B3"
STATUS_ERROR_COLOR = "#F87171"
STATUS_SUCCESS_COLOR = "#22C55E"
WINDOW_WIDTH = 600
WINDOW_HEIGHT = 480
UI_TICK_SECONDS = 0.02


def _open_url_with_system_browser(url: str) -> None:
    """Ouvre une URL avec l’outil système adapté à l’environnement."""
    if "WSL_DISTRO_NAME" in os.environ:
        try:
            subprocess.run(["wslview", url], check=False)
            return
        except FileNotFoundError:
            pass

    if sys.platform.startswith("linux"):
        try:
            subprocess.run(["xdg-open", url], check=False)
            return
        except FileNotFoundError:
            pass

    try:
        webbrowser.open(url)
    except webbrowser.Error:
        logger.warning("Impossible d'ouvrir %s dans le navigateur.", url)


class MainWindow:
    """Fenêtre principale de l'application.

    La boucle Tk est pompée depuis une coroutine : les intentions de
    l'utilisateur s'exécutent comme des tâches sur la même boucle asyncio.
    """

    def __init__(self, presenter: ShortenerPresenter) -> None:
        self._presenter = presenter
        self._tasks: set[asyncio.Task[Any]] = set()
        self._running = False

        self.root = tk.Tk()
        self.root.title("URL Shortener")
        self.root.geometry(f"{WINDOW_WIDTH}x{WINDOW_HEIGHT}")
        self.root.minsize(WINDOW_WIDTH, WINDOW_HEIGHT)
        self.root.protocol("WM_DELETE_WINDOW", self._close)

        sv_ttk.set_theme("dark")
        self.root.configure(bg=BACKGROUND_COLOR)
        self._configure_styles()

        self._email_var = tk.StringVar()
        self._password_var = tk.StringVar()
        self._url_var = tk.StringVar()
        self._was_authenticated = False

        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(1, weight=1)

        self._build_header()
        self._build_login_section()
        self._build_shortener_section()
        self._build_error_label()

        self._unsubscribe = presenter.subscribe(self._render)
        self._render()

    # --------------------------------------------------------------------- UI -
    def _configure_styles(self) -> None:
        style = ttk.Style()
        style.configure("Main.TFrame", background=BACKGROUND_COLOR)
        style.configure("Card.TFrame", background=CARD_COLOR)
        style.configure(
            "HeaderTitle.TLabel",
            background=BACKGROUND_COLOR,
            foreground="#FFFFFF",
            font=("Helvetica", 20, "bold"),
        )
        style.configure(
            "Section.TLabel",
            background=CARD_COLOR,
            foreground="#FFFFFF",
            font=("Helvetica", 12, "bold"),
        )
        style.configure(
            "Status.TLabel",
            background=CARD_COLOR,
            foreground=STATUS_NEUTRAL_COLOR,
            font=("Helvetica", 11),
        )
        style.configure(
            "Error.TLabel",
            background=BACKGROUND_COLOR,
            foreground=STATUS_ERROR_COLOR,
            font=("Helvetica", 11),
        )
        style.configure(
            "Link.TLabel",
            background=CARD_COLOR,
            foreground=ACCENT_COLOR,
            font=("Helvetica", 12, "underline"),
        )
        style.configure("Accent.TButton", font=("Helvetica", 11, "bold"))
        style.configure("TButton", padding=(16, 8))
        style.map("TButton", background=[("disabled", "#2B2B2B")])
        self.root.option_add("*Font", "Helvetica 11")

    def _build_header(self) -> None:
        frame = ttk.Frame(self.root, style="Main.TFrame", padding=(24, 16))
        frame.grid(row=0, column=0, sticky="we")
        ttk.Label(frame, text="URL Shortener", style="HeaderTitle.TLabel").pack(side=tk.LEFT)

    def _build_login_section(self) -> None:
        frame = ttk.Frame(self.root, style="Card.TFrame", padding=(20, 18))
        frame.columnconfigure(0, weight=1)
        self._login_frame = frame

        ttk.Label(frame, text="Connexion ou inscription", style="Section.TLabel").grid(
            row=0, column=0, columnspan=2, sticky="w"
        )
        ttk.Label(frame, text="Email :", style="Status.TLabel").grid(
            row=1, column=0, sticky="w", pady=(14, 0)
        )
        email_entry = ttk.Entry(frame, textvariable=self._email_var)
        email_entry.grid(row=2, column=0, columnspan=2, sticky="ew", ipady=4)

        ttk.Label(frame, text="Mot de passe :", style="Status.TLabel").grid(
            row=3, column=0, sticky="w", pady=(10, 0)
        )
        password_entry = ttk.Entry(frame, textvariable=self._password_var, show="•")
        password_entry.grid(row=4, column=0, columnspan=2, sticky="ew", ipady=4)
        password_entry.bind("<Return>", lambda _: self.login())

        self._login_button = ttk.Button(
            frame,
            text="Se connecter",
            command=self.login,
            style="Accent.TButton",
        )
        self._login_button.grid(row=5, column=0, sticky="w", pady=(18, 0))

        self._signup_button = ttk.Button(frame, text="S'inscrire", command=self.signup)
        self._signup_button.grid(row=5, column=1, sticky="e", pady=(18, 0))

    def _build_shortener_section(self) -> None:
        frame = ttk.Frame(self.root, style="Card.TFrame", padding=(20, 18))
        frame.columnconfigure(0, weight=1)
        self._shortener_frame = frame

        self._user_label = ttk.Label(frame, text="", style="Status.TLabel")
        self._user_label.grid(row=0, column=0, sticky="w")

        self._logout_button = ttk.Button(frame, text="Déconnexion", command=self.logout)
        self._logout_button.grid(row=0, column=1, sticky="e")

        ttk.Label(frame, text="URL à raccourcir :", style="Section.TLabel").grid(
            row=1, column=0, columnspan=2, sticky="w", pady=(18, 0)
        )
        url_entry = ttk.Entry(frame, textvariable=self._url_var)
        url_entry.grid(row=2, column=0, columnspan=2, sticky="ew", ipady=4, pady=(8, 0))
        url_entry.bind("<Return>", lambda _: self.submit_url())

        self._shorten_button = ttk.Button(
            frame,
            text="Raccourcir",
            command=self.submit_url,
            style="Accent.TButton",
        )
        self._shorten_button.grid(row=3, column=0, sticky="w", pady=(14, 0))

        self._result_label = ttk.Label(frame, text="", style="Link.TLabel", cursor="hand2")
        self._result_label.grid(row=4, column=0, columnspan=2, sticky="w", pady=(18, 0))
        self._result_label.bind("<Button-1>", self._open_short_url)

    def _build_error_label(self) -> None:
        self._error_label = ttk.Label(self.root, text="", style="Error.TLabel", padding=(24, 12))
        self._error_label.grid(row=2, column=0, sticky="we")

    def _render(self) -> None:
        """Redessine l'interface à partir de l'état exposé par le présentateur."""
        snapshot: ViewSnapshot = self._presenter.snapshot()
        is_authenticated = snapshot.auth.is_authenticated
        button_state = tk.DISABLED if snapshot.busy else tk.NORMAL

        if is_authenticated:
            self._login_frame.grid_remove()
            self._shortener_frame.grid(row=1, column=0, sticky="new", padx=24)
            user = snapshot.auth.user
            self._user_label.configure(
                text=f"Connecté en tant que : {user.display_name if user else ''}",
                foreground=STATUS_SUCCESS_COLOR,
            )
            self._shorten_button.configure(
                text="Raccourcissement..." if snapshot.busy else "Raccourcir",
                state=button_state,
            )
            self._result_label.configure(text=snapshot.short_url or "")
        else:
            self._shortener_frame.grid_remove()
            self._login_frame.grid(row=1, column=0, sticky="new", padx=24)
            self._login_button.configure(
                text="Connexion..." if snapshot.busy else "Se connecter",
                state=button_state,
            )
            self._signup_button.configure(
                text="Inscription..." if snapshot.busy else "S'inscrire",
                state=button_state,
            )
            if self._was_authenticated:
                self._clear_fields()

        self._was_authenticated = is_authenticated
        self._error_label.configure(text=snapshot.error or "")

    def _clear_fields(self) -> None:
        self._email_var.set("")
        self._password_var.set("")
        self._url_var.set("")

    # --------------------------------------------------------------- Callbacks -
    def login(self) -> None:
        self._spawn(self._presenter.login(self._email_var.get(), self._password_var.get()))

    def signup(self) -> None:
        self._spawn(self._presenter.signup(self._email_var.get(), self._password_var.get()))

    def logout(self) -> None:
        self._spawn(self._presenter.logout())

    def submit_url(self) -> None:
        if self._presenter.snapshot().busy:
            return
        self._spawn(self._presenter.submit_url(self._url_var.get()))

    def _open_short_url(self, _event: tk.Event) -> None:
        short_url = self._presenter.snapshot().short_url
        if short_url:
            _open_url_with_system_browser(short_url)

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Tâche d'interface en échec", exc_info=task.exception())

    def _close(self) -> None:
        self._running = False

    # ----------------------------------------------------------------- Public -
    async def run(self) -> None:
        """Pompe la boucle Tk jusqu'à la fermeture de la fenêtre."""
        self._running = True
        self._spawn(self._presenter.start())
        try:
            while self._running:
                self.root.update()
                await asyncio.sleep(UI_TICK_SECONDS)
        finally:
            for task in list(self._tasks):
                task.cancel()
            self._unsubscribe()
            self._presenter.stop()
            self.root.destroy()
