import base64
import io

from PIL import Image

from src.fertify_client.imaging import encode_image_base64


def test_encodes_resized_jpeg(tmp_path):
    image_path = tmp_path / "leaf.png"
    Image.new("RGBA", (2048, 1024), color=(0, 128, 0, 255)).save(image_path)

    encoded = encode_image_base64(image_path, max_size=512)

    decoded = Image.open(io.BytesIO(base64.b64decode(encoded)))
    assert decoded.format == "JPEG"
    assert decoded.mode == "RGB"
    assert decoded.size == (512, 256)


def test_small_images_are_not_upscaled(tmp_path):
    image_path = tmp_path / "leaf.jpg"
    Image.new("RGB", (100, 80), color="green").save(image_path)

    decoded = Image.open(io.BytesIO(base64.b64decode(encode_image_base64(image_path))))

    assert decoded.size == (100, 80)
