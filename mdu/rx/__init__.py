"""Decoder side of MDU: receiver, binary tree search, entry point, ZPP and ZSU updates."""