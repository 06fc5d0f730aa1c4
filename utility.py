#!/usr/bin/python3
# -*- coding: UTF-8 -*-
# utility.py - Helper functions


def userChoice(options, prompt="Your selection: ", formatter=str):
    madeValidChoice = False
    print(" -=-= Choose One =-=- ")
    for i in range(len(options)):
        print("[{}] : {}".format(i+1, formatter(options[i])))
    while not madeValidChoice:
        j = input(prompt)
        try:
            j = int(j)
        except ValueError:
            j = 0
        if 1 <= j <= len(options):
            madeValidChoice = True
        else:
            print("Please choose a number from the list (1 to {}).".format(len(options)))
    # Return the user's integer choice (1-N)
    # but subtract one because options[] is zero-indexed.
    return options[j-1]


def parseCommand(line):
    """Split a console line into (verb, argument).

    Case and surrounding whitespace are ignored. Only 'move' takes an argument;
    any other multi-word line comes back whole as the verb so it reads as invalid.
    """
    words = line.strip().lower().split()
    if not words:
        return "", None
    if len(words) == 1:
        return words[0], None
    if len(words) == 2 and words[0] == "move":
        return "move", words[1]
    return " ".join(words), None
