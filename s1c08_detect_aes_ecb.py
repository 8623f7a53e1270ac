#!/usr/bin/env python3
from matasano import AES_BLOCK_SIZE, identify_ciphertexts_encrypted_with_ecb, load_hex_lines

"""
Detect AES in ECB mode

In this file are a bunch of hex-encoded ciphertexts.

One of them has been encrypted with ECB.

Detect it.

Remember that the problem with ECB is that it is stateless and deterministic; the same 16 byte plaintext block will always produce the same 16 byte ciphertext.
"""


def main():
    ciphertexts = load_hex_lines("s1c08.txt")

    suspected_ecb_ciphertexts = identify_ciphertexts_encrypted_with_ecb(ciphertexts, block_size=AES_BLOCK_SIZE)

    print("Suspected ECB ciphertexts:")
    for index, sus in suspected_ecb_ciphertexts:
        print(f"Line {index}: {sus.hex()}")


if __name__ == "__main__":
    main()
