import base64
import binascii
import itertools
import logging
from dataclasses import dataclass
from itertools import cycle
from pathlib import Path
from typing import Callable, Generator, Iterable, List, Optional, Tuple, Union
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"

AES_BLOCK_SIZE = 16

# Candidate keys for single-byte XOR, keys >= 128 are never tried
SINGLE_BYTE_KEYS = range(128)

KEYSIZE_RANGE = range(2, 40)
KEYSIZE_SAMPLE_BLOCKS = 13

UNKNOWN_CHAR_SCORE = -0.01


class DecodeError(ValueError):
    pass


class LengthMismatchError(ValueError):
    pass


class EmptyInputError(ValueError):
    pass


class InsufficientDataError(ValueError):
    pass


class PaddingError(Exception):
    pass


def decode_hex(s: str) -> bytes:
    """
    >>> decode_hex("49276d")
    b"I'm"
    >>> decode_hex("4927f")
    Traceback (most recent call last):
    matasano.DecodeError: Invalid hex: '4927f'
    >>> decode_hex("zz")
    Traceback (most recent call last):
    matasano.DecodeError: Invalid hex: 'zz'
    >>> decode_hex("49 27 6d")
    Traceback (most recent call last):
    matasano.DecodeError: Invalid hex: '49 27 6d'
    """
    try:
        return binascii.unhexlify(s)
    except ValueError as e:
        raise DecodeError(f"Invalid hex: {s!r}") from e


def decode_base64(s: str) -> bytes:
    """
    Decode standard base64, ignoring whitespace such as the line breaks in the challenge files

    >>> decode_base64("SGVs\\nbG8=\\n")
    b'Hello'
    >>> decode_base64("SGVsbG8")
    Traceback (most recent call last):
    matasano.DecodeError: Invalid base64: 'SGVsbG8'
    """
    stripped = "".join(s.split())
    try:
        return base64.b64decode(stripped, validate=True)
    except binascii.Error as e:
        raise DecodeError(f"Invalid base64: {stripped!r}") from e


def hex2b64(hex: str) -> str:
    """
    Decodes hex to bytes and returns a base64 representation of those bytes

    >>> hex2b64('49276d206b696c6c696e6720796f757220627261696e206c696b65206120706f69736f6e6f7573206d757368726f6f6d')
    'SSdtIGtpbGxpbmcgeW91ciBicmFpbiBsaWtlIGEgcG9pc29ub3VzIG11c2hyb29t'
    """
    binary = decode_hex(hex)
    return base64.b64encode(binary).decode()


def fixed_xor(b1: bytes, b2: bytes) -> bytes:
    """
    Take two bytes arguments of equal length, return their XOR

    >>> arg1 = bytes.fromhex('1c0111001f010100061a024b53535009181c')
    >>> arg2 = bytes.fromhex('686974207468652062756c6c277320657965')
    >>> fixed_xor(arg1, arg2).hex()
    '746865206b696420646f6e277420706c6179'

    >>> fixed_xor(b"AAAA", b"AAA")
    Traceback (most recent call last):
    matasano.LengthMismatchError: Arguments are of different length
    """
    if len(b1) != len(b2):
        raise LengthMismatchError("Arguments are of different length")
    res = []
    for a, b in zip(b1, b2):
        res.append(a ^ b)
    return bytes(res)


def hex_xor(hex1: str, hex2: str) -> str:
    """
    >>> hex_xor('1c0111001f010100061a024b53535009181c', '686974207468652062756c6c277320657965')
    '746865206b696420646f6e277420706c6179'
    """
    return fixed_xor(decode_hex(hex1), decode_hex(hex2)).hex()


def repeating_key_xor(plaintext: bytes, key: bytes) -> bytes:
    """
    Cycle the key, XOR plaintext with it, and return ciphertext

    >>> plaintext = b"Burning 'em, if you ain't quick and nimble\\nI go crazy when I hear a cymbal"
    >>> repeating_key_xor(plaintext, b"ICE").hex()
    '0b3637272a2b2e63622c2e69692a23693a2a3c6324202d623d63343c2a26226324272765272a282b2f20430a652e2c652a3124333a653e2b2027630c692b20283165286326302e27282f'

    XOR is its own inverse

    >>> repeating_key_xor(repeating_key_xor(plaintext, b"wokka"), b"wokka") == plaintext
    True
    >>> repeating_key_xor(b"", b"ICE")
    b''
    >>> repeating_key_xor(plaintext, b"")
    Traceback (most recent call last):
    matasano.EmptyInputError: Key must be non-zero length
    """
    if not key:
        raise EmptyInputError("Key must be non-zero length")
    res = []
    for a, b in zip(plaintext, cycle(key)):
        res.append(a ^ b)
    return bytes(res)


def single_byte_xor(data: bytes, key: int) -> bytes:
    """
    XOR every byte of data with key

    >>> single_byte_xor(b"\\x00\\x01\\xff", 0x58)
    b'XY\\xa7'
    >>> data = bytes(range(256))
    >>> all(single_byte_xor(single_byte_xor(data, k), k) == data for k in range(256))
    True
    """
    return repeating_key_xor(data, bytes([key]))


# https://pi.math.cornell.edu/~mec/2003-2004/cryptography/subs/frequencies.html
en_char_frequencies = {'e': 0.1202, 't': 0.091, 'a': 0.0812, 'o': 0.0768, 'i': 0.0731, 'n': 0.0695, 's': 0.0628,
                       'r': 0.0602, 'h': 0.0592, 'd': 0.0432, 'l': 0.0398, 'u': 0.0288, 'c': 0.0271, 'm': 0.0261,
                       'f': 0.023, 'y': 0.0211, 'w': 0.0209, 'g': 0.0203, 'p': 0.0182, 'b': 0.0149, 'v': 0.0111,
                       'k': 0.0069, 'x': 0.0017, 'q': 0.0011, 'j': 0.001, 'z': 0.0007, ' ': 0.15}

byte_frequencies = {ord(c): frequency for c, frequency in en_char_frequencies.items()}


def score_text(text: bytes) -> float:
    """
    Give a score for how English-like text is. Each lowercase letter or space adds its expected frequency, every
    other byte (uppercase and punctuation included) costs UNKNOWN_CHAR_SCORE. Higher score means more English-like

    >>> round(score_text(b"e "), 4)
    0.2702
    >>> round(score_text(b"E!"), 4)
    -0.02
    >>> score_text(b"")
    0.0

    Spaces and common letters beat high garbage bytes of the same length

    >>> score_text(b"etaoi " * 4) > score_text(bytes(range(0xf0, 0x100)) + b"\\xff" * 8)
    True
    >>> score_text(b"hello world") == score_text(b"hello world")
    True
    """
    score = 0.0
    for b in text:
        score += byte_frequencies.get(b, UNKNOWN_CHAR_SCORE)
    return score


@dataclass
class ScoredDecryptionResult:
    plaintext: bytes
    ciphertext: bytes
    key: int
    score: float
    index: int = 0

    def __repr__(self):
        return f"ScoredDecryptionResult(plaintext={self.plaintext}, ciphertext={self.ciphertext}, key={self.key:#02x}, score={self.score:.2f}, index={self.index})"


def break_single_xor_cipher(ciphertexts: List[bytes],
                            scoring_function: Callable[[bytes], float] = score_text) -> List[ScoredDecryptionResult]:
    """
    Use character frequency analysis to brute-force single-byte XOR ciphertexts

    Return a ScoredDecryptionResult for every (ciphertext, key) candidate, best first according to scoring_function.
    The sort is stable, so equal scores keep the order ciphertexts and keys were tried in

    >>> ciphertext = bytes.fromhex("1b37373331363f78151b7f2b783431333d78397828372d363c78373e783a393b3736")
    >>> results = break_single_xor_cipher([ciphertext])
    >>> results[0].plaintext
    b"Cooking MC's like a pound of bacon"
    >>> len(results)
    128

    Ties go to the lowest key

    >>> [r.key for r in break_single_xor_cipher([b"ab"], scoring_function=lambda text: 0)[:3]]
    [0, 1, 2]

    >>> break_single_xor_cipher([b""])
    Traceback (most recent call last):
    matasano.EmptyInputError: Ciphertext 0 is empty
    >>> break_single_xor_cipher([])
    Traceback (most recent call last):
    matasano.EmptyInputError: No ciphertexts given
    """
    if not ciphertexts:
        raise EmptyInputError("No ciphertexts given")

    decryptions: List[ScoredDecryptionResult] = []

    for index, ciphertext in enumerate(ciphertexts):
        if not ciphertext:
            raise EmptyInputError(f"Ciphertext {index} is empty")
        for k in SINGLE_BYTE_KEYS:
            plaintext = single_byte_xor(ciphertext, k)
            decryptions.append(ScoredDecryptionResult(plaintext=plaintext,
                                                      ciphertext=ciphertext,
                                                      key=k,
                                                      score=scoring_function(plaintext),
                                                      index=index))

    return sorted(decryptions, key=lambda x: x.score, reverse=True)


def solve_single_byte_xor(ciphertext: bytes) -> ScoredDecryptionResult:
    """
    >>> result = solve_single_byte_xor(decode_hex("1b37373331363f78151b7f2b783431333d78397828372d363c78373e783a393b3736"))
    >>> result.key, chr(result.key)
    (88, 'X')
    >>> result.plaintext
    b"Cooking MC's like a pound of bacon"
    """
    return break_single_xor_cipher([ciphertext])[0]


def detect_single_byte_xor(ciphertexts: List[bytes]) -> ScoredDecryptionResult:
    """
    Given many ciphertexts, one of which was encrypted with single-byte XOR, return the most English-looking
    decryption across all of them

    >>> secret = single_byte_xor(b"Now that the party is jumping\\n", 53)
    >>> noise = [bytes((i * 37 + j * 101) % 256 for j in range(30)) for i in range(5)]
    >>> result = detect_single_byte_xor(noise[:3] + [secret] + noise[3:])
    >>> result.index, result.key
    (3, 53)
    >>> result.plaintext
    b'Now that the party is jumping\\n'
    """
    return break_single_xor_cipher(ciphertexts)[0]


def bitwise_hamming_distance(b1: bytes, b2: bytes) -> int:
    """
    Return the number of bits that must be changed in b1 to get b2

    >>> bitwise_hamming_distance(b"HELLO", b"JELLO")
    1
    >>> bitwise_hamming_distance(b"AAAAA", b"JJJJA")
    12
    >>> bitwise_hamming_distance(b"this is a test", b"wokka wokka!!!")
    37
    >>> bitwise_hamming_distance(b"wokka wokka!!!", b"this is a test")
    37
    >>> bitwise_hamming_distance(b"wokka", b"wokka")
    0
    >>> bitwise_hamming_distance(b"AAAA", b"AAA")
    Traceback (most recent call last):
    matasano.LengthMismatchError: Inputs are of different length
    """
    if len(b1) != len(b2):
        raise LengthMismatchError("Inputs are of different length")
    res = 0
    for a, b in zip(b1, b2):
        x = a ^ b
        while x:
            res += x & 1
            x >>= 1
    return res


def chunkify(b: bytes, chunk_size: int) -> Generator[bytes, None, None]:
    """
    Yield chunk_size sized chunks from b

    >>> list(chunkify(b"ABCD", 2))
    [b'AB', b'CD']

    >>> list(chunkify(b"ABCDE", 2))
    [b'AB', b'CD', b'E']
    """
    for i in range(0, len(b), chunk_size):
        yield b[i:i + chunk_size]


def pairwise(iterable: Iterable) -> Iterable[Tuple]:
    """
    >>> list(pairwise('ABCD'))
    [('A', 'B'), ('B', 'C'), ('C', 'D')]
    """
    a, b = itertools.tee(iterable)
    next(b, None)
    return zip(a, b)


def keysize_distances(ciphertext: bytes) -> List[Tuple[int, float]]:
    """
    For every candidate keysize, sum the hamming distances between neighbouring keysize-long blocks at the start
    of ciphertext (up to KEYSIZE_SAMPLE_BLOCKS blocks) and normalise by the keysize

    Keysizes that don't give at least two full blocks are left out

    >>> keysize_distances(b"ABAB")
    [(2, 0.0)]
    >>> keysize_distances(b"ABC")
    []
    >>> [keysize for keysize, _ in keysize_distances(bytes(80))] == list(KEYSIZE_RANGE)
    True
    """
    distances: List[Tuple[int, float]] = []

    for keysize in KEYSIZE_RANGE:
        blocks = [chunk for chunk in chunkify(ciphertext, keysize) if len(chunk) == keysize]
        blocks = blocks[:KEYSIZE_SAMPLE_BLOCKS]
        if len(blocks) < 2:
            continue
        distance = 0
        for a, b in pairwise(blocks):
            distance += bitwise_hamming_distance(a, b)
        distances.append((keysize, distance / keysize))

    return distances


def guess_repeating_xor_key_length(ciphertext: bytes) -> int:
    """
    Given a ciphertext which is the result of applying repeating XOR with an unknown key of unknown
    length, guess the length of the key. The keysize with the smallest normalised inter-block hamming
    distance wins, the smaller keysize winning a tie

    Only keys of 20 bytes or more are reliable. A shorter key has multiples inside KEYSIZE_RANGE which
    line up just as well, and one of those often wins

    >>> plaintext = data_path("alice.txt").read_bytes()[:600]
    >>> key = b"Zx9#Qm!pL2vR@kT7w^yH&bN"
    >>> guess_repeating_xor_key_length(repeating_key_xor(plaintext, key)) == len(key)
    True

    >>> import random
    >>> rng = random.Random(1)
    >>> lengths = [20, 23, 29, 31, 37]
    >>> keys = [bytes(rng.randrange(256) for _ in range(n)) for n in lengths]
    >>> [guess_repeating_xor_key_length(repeating_key_xor(plaintext, k)) for k in keys] == lengths
    True

    >>> guess_repeating_xor_key_length(b"ABC")
    Traceback (most recent call last):
    matasano.InsufficientDataError: Ciphertext of length 3 is too short to guess a keysize
    >>> guess_repeating_xor_key_length(b"")
    Traceback (most recent call last):
    matasano.EmptyInputError: ciphertext must be non-zero length
    """
    if not ciphertext:
        raise EmptyInputError("ciphertext must be non-zero length")

    scores = keysize_distances(ciphertext)
    if not scores:
        raise InsufficientDataError(f"Ciphertext of length {len(ciphertext)} is too short to guess a keysize")

    scores = sorted(scores, key=lambda x: x[1])
    log.debug("Best keysize candidates: %s", ", ".join(f"{k} ({d:.2f})" for k, d in scores[:3]))

    return scores[0][0]


def transpose(ciphertext: bytes, keysize: int) -> List[bytes]:
    """
    Split ciphertext into keysize columns, column i holding every byte that was XOR'd with key[i]

    >>> transpose(b"ABCDEFG", 3)
    [b'ADG', b'BE', b'CF']
    >>> all(sum(map(len, cols)) == n and max(map(len, cols)) - min(map(len, cols)) <= 1
    ...     for n in range(1, 60) for s in range(1, 10) for cols in [transpose(bytes(n), s)])
    True
    """
    return [ciphertext[i::keysize] for i in range(keysize)]


def break_repeating_key_xor(ciphertext: bytes, key_length: Optional[int] = None) -> bytes:
    """
    Return the best-guess key for a ciphertext which has been encrypted using repeating key XOR

    @param ciphertext: The encrypted ciphertext
    @param key_length: (Optional) the key length, if known. If unknown, inter-block hamming distance will be used to derive it

    >>> plaintext = data_path("alice.txt").read_bytes()[:2048]
    >>> break_repeating_key_xor(repeating_key_xor(plaintext, b"Zx9#Qm!pL2vR@kT7w^yH&bN"))
    b'Zx9#Qm!pL2vR@kT7w^yH&bN'

    This key is mistaken for length 2 by the guesser, but the columns solve once the length is known

    >>> key = b"You wouldn't batch an RPC call"
    >>> break_repeating_key_xor(repeating_key_xor(plaintext, key), key_length=len(key))
    b"You wouldn't batch an RPC call"
    >>> break_repeating_key_xor(repeating_key_xor(plaintext, b"ICE"), key_length=3)
    b'ICE'

    >>> break_repeating_key_xor(b"ABCDEF", key_length=0)
    Traceback (most recent call last):
    ValueError: key_length must be between 1 and 6, got 0
    >>> break_repeating_key_xor(b"ABCDEF", key_length=7)
    Traceback (most recent call last):
    ValueError: key_length must be between 1 and 6, got 7
    """
    if not ciphertext:
        raise EmptyInputError("ciphertext must be non-zero length")

    if key_length is None:
        key_length = guess_repeating_xor_key_length(ciphertext)
        log.debug("Guessed key length %d", key_length)
    elif not 1 <= key_length <= len(ciphertext):
        raise ValueError(f"key_length must be between 1 and {len(ciphertext)}, got {key_length}")

    key: List[int] = []

    for column in transpose(ciphertext, key_length):
        key.append(solve_single_byte_xor(column).key)

    log.debug("Recovered key %r", bytes(key))
    return bytes(key)


def decrypt_repeating_key_xor(ciphertext: bytes) -> Tuple[bytes, bytes]:
    """
    Break and decrypt a repeating key XOR ciphertext, returning (key, plaintext)

    >>> plaintext = data_path("alice.txt").read_bytes()[:2048]
    >>> key, recovered = decrypt_repeating_key_xor(repeating_key_xor(plaintext, b"Zx9#Qm!pL2vR@kT7w^yH&bN"))
    >>> key
    b'Zx9#Qm!pL2vR@kT7w^yH&bN'
    >>> recovered == plaintext
    True
    """
    key = break_repeating_key_xor(ciphertext)
    return key, repeating_key_xor(ciphertext, key)


def aes128_ecb_decrypt(ciphertext: bytes, key: bytes) -> bytes:
    """
    Decrypt ciphertext using AES-128 in ECB mode using the given key

    Automatically unpads plaintext using PKCS#7

    >>> aes128_ecb_decrypt(b"too short", key=bytes([0]*16))
    Traceback (most recent call last):
    ValueError: The length of the provided data is not a multiple of the block length.

    >>> aes128_ecb_decrypt(b"A"*16, key=b"too short")
    Traceback (most recent call last):
    ValueError: Invalid key size (72) for AES.
    """
    cipher = Cipher(algorithms.AES128(key), modes.ECB())
    decryptor = cipher.decryptor()
    plaintext = decryptor.update(ciphertext) + decryptor.finalize()
    plaintext = unpad_pkcs7(plaintext)
    return plaintext


def aes128_ecb_encrypt(plaintext: bytes, key: bytes) -> bytes:
    """
    Encrypt plaintext using AES-128 in ECB mode using the given key

    Automatically pads plaintext using PKCS#7

    FIPS-197 appendix C.1, the second block is the encrypted padding

    >>> key = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
    >>> ciphertext = aes128_ecb_encrypt(bytes.fromhex("00112233445566778899aabbccddeeff"), key)
    >>> len(ciphertext)
    32
    >>> ciphertext[:16].hex()
    '69c4e0d86a7b0430d8cdb78070b4c55a'

    >>> plaintext = b"Beware of hazardous materials"
    >>> key = b"YELLOW SUBMARINE"
    >>> aes128_ecb_decrypt(aes128_ecb_encrypt(plaintext, key), key) == plaintext
    True

    >>> aes128_ecb_encrypt(b"AAAA", key=b"too short")
    Traceback (most recent call last):
    ValueError: Invalid key size (72) for AES.
    """
    plaintext = pad_pkcs7(plaintext, AES_BLOCK_SIZE)
    cipher = Cipher(algorithms.AES128(key), modes.ECB())
    encryptor = cipher.encryptor()
    return encryptor.update(plaintext) + encryptor.finalize()


def has_duplicate_block(ciphertext: bytes, block_size: int = AES_BLOCK_SIZE) -> bool:
    """
    >>> has_duplicate_block(aes128_ecb_encrypt(b"A"*48, b"YELLOW SUBMARINE"))
    True
    >>> has_duplicate_block(bytes(range(64)))
    False
    """
    chunks = list(chunkify(ciphertext, block_size))
    return len(chunks) != len(set(chunks))


def identify_ciphertexts_encrypted_with_ecb(ciphertexts: List[bytes],
                                            block_size: int = AES_BLOCK_SIZE) -> List[Tuple[int, bytes]]:
    """
    Given a list of ciphertexts, return (index, ciphertext) for those suspected to have been encrypted using
    a block cipher in ECB mode.

    This function assumes that _any_ redundancy on a block basis indicates ECB encryption.

    >>> ecb = aes128_ecb_encrypt(b"YELLOW SUBMARINE"*3, b"0123456789abcdef")
    >>> [i for i, _ in identify_ciphertexts_encrypted_with_ecb([bytes(range(64)), ecb, bytes(range(100, 164))])]
    [1]
    >>> identify_ciphertexts_encrypted_with_ecb([bytes(range(64))])
    []
    """
    sus: List[Tuple[int, bytes]] = []
    for index, ciphertext in enumerate(ciphertexts):
        if has_duplicate_block(ciphertext, block_size):
            sus.append((index, ciphertext))
    return sus


def pad_pkcs7(data: bytes, block_size: int) -> bytes:
    """
    >>> pad_pkcs7(b"YELLOW SUBMARINE", 20)
    b'YELLOW SUBMARINE\\x04\\x04\\x04\\x04'
    >>> pad_pkcs7(b"YELLOW SUBMARINE", 16)
    b'YELLOW SUBMARINE\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10\\x10'
    >>> pad_pkcs7(b"YELLOW SUBMARINE", 17)
    b'YELLOW SUBMARINE\\x01'
    """
    num_padding_bytes = block_size - len(data) % block_size
    return data + bytes([num_padding_bytes] * num_padding_bytes)


def unpad_pkcs7(data: bytes, strict: bool = True) -> bytes:
    """
    >>> unpad_pkcs7(b"Hello, world!\\x02\\x02")
    b'Hello, world!'
    >>> unpad_pkcs7(pad_pkcs7(b"Beware of the hazmat", 100))
    b'Beware of the hazmat'
    >>> unpad_pkcs7(b"Hello, world!\\x02")
    Traceback (most recent call last):
    matasano.PaddingError: Bad padding in b'Hello, world!\\x02'
    >>> unpad_pkcs7(b"Hello, world!\\x00")
    Traceback (most recent call last):
    matasano.PaddingError: Bad padding in b'Hello, world!\\x00'
    >>> unpad_pkcs7(b"")
    Traceback (most recent call last):
    matasano.PaddingError: Bad padding in b''
    """
    if not data:
        raise PaddingError(f"Bad padding in {data!r}")
    num_padding_bytes = data[-1]
    if num_padding_bytes == 0 or num_padding_bytes > len(data):
        raise PaddingError(f"Bad padding in {data!r}")
    unpadded = data[:-1*num_padding_bytes]
    if strict:
        if any(b != num_padding_bytes for b in data[-1*num_padding_bytes:]):
            raise PaddingError(f"Bad padding in {data!r}")
    return unpadded


def data_path(name: str, data_dir: Optional[Union[str, Path]] = None) -> Path:
    """
    >>> data_path("s1c04.txt", data_dir="/tmp").as_posix()
    '/tmp/s1c04.txt'
    """
    return Path(data_dir if data_dir is not None else DATA_DIR) / name


def load_hex_lines(name: str, data_dir: Optional[Union[str, Path]] = None) -> List[bytes]:
    """
    Load a challenge file holding one hex-encoded ciphertext per line

    >>> import tempfile
    >>> with tempfile.TemporaryDirectory() as d:
    ...     _ = (Path(d) / "lines.txt").write_text("00ff\\n\\nabcd\\n")
    ...     lines = load_hex_lines("lines.txt", data_dir=d)
    >>> lines
    [b'\\x00\\xff', b'\\xab\\xcd']
    """
    with open(data_path(name, data_dir), "r") as f:
        return [decode_hex(line.strip()) for line in f if line.strip()]


def load_base64(name: str, data_dir: Optional[Union[str, Path]] = None) -> bytes:
    """
    Load a challenge file holding a single base64 blob, possibly split over many lines
    """
    with open(data_path(name, data_dir), "r") as f:
        return decode_base64(f.read())
