#!/usr/bin/env python3
from matasano import break_single_xor_cipher, load_hex_lines

"""
Detect single-character XOR

One of the 60-character strings in this file has been encrypted by single-character XOR.

Find it.

(Your code from #3 should help.)
"""


def main():
    ciphertexts = load_hex_lines("s1c04.txt")

    results = break_single_xor_cipher(ciphertexts)
    n = 10
    print(f"Top {n} results")
    for result in results[:n]:
        print(result)

    winner = results[0]
    print(f"Line {winner.index} decrypts with key {winner.key:#02x} to {winner.plaintext!r}")


if __name__ == "__main__":
    main()
