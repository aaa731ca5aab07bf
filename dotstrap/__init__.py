"""Workstation bootstrap: packages, font, zsh, chezmoi dotfiles and a refresh job."""

APP_NAME = "Dotfiles Bootstrap"
VERSION = "1.2.0"
