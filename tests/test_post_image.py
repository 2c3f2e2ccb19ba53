"""
PUT /post-image: auth enforced locally, benign no-file signal, echo of oldPath.
"""

PNG = b"\x89PNG\r\n\x1a\nfake-image-bytes"


def _stored_files(settings):
    return sorted(p.name for p in settings.upload_dir.iterdir())


def test_requires_authentication(client, settings):
    response = client.put(
        "/post-image",
        files={"image": ("a.png", PNG, "image/png")},
    )

    assert response.status_code == 401
    assert response.json() == {"message": "Not Authenticated", "status": 401}
    assert _stored_files(settings) == []


def test_invalid_token_is_treated_as_unauthenticated(client):
    response = client.put("/post-image", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401


def test_no_file_is_not_an_error(client, auth_header):
    first = client.put("/post-image", headers=auth_header)
    second = client.put("/post-image", headers=auth_header)

    for response in (first, second):
        assert response.status_code == 200
        assert response.json() == {"message": "No file provided!"}


def test_no_file_does_not_delete_old_image(client, settings, auth_header):
    old = settings.upload_dir / "keep.png"
    old.write_bytes(PNG)

    response = client.put("/post-image", headers=auth_header, data={"oldPath": "images/keep.png"})

    assert response.json() == {"message": "No file provided!"}
    assert old.exists()


def test_filtered_media_type_looks_like_no_file(client, settings, auth_header):
    response = client.put(
        "/post-image",
        headers=auth_header,
        files={"image": ("report.pdf", b"%PDF-1.7", "application/pdf")},
    )

    assert response.status_code == 200
    assert response.json() == {"message": "No file provided!"}
    assert _stored_files(settings) == []


def test_replacement_echoes_old_path_and_deletes_it(client, settings, auth_header):
    old = settings.upload_dir / "x.png"
    old.write_bytes(b"old")

    response = client.put(
        "/post-image",
        headers=auth_header,
        files={"image": ("new.png", PNG, "image/png")},
        data={"oldPath": "images/x.png"},
    )

    assert response.status_code == 201
    assert response.json() == {"message": "File stored", "filePath": "images/x.png"}
    assert not old.exists()

    stored = _stored_files(settings)
    assert len(stored) == 1
    assert stored[0].endswith("_new.png")
    assert (settings.upload_dir / stored[0]).read_bytes() == PNG


def test_first_upload_without_old_path(client, settings, auth_header):
    response = client.put(
        "/post-image",
        headers=auth_header,
        files={"image": ("first.jpg", b"jpeg", "image/jpeg")},
    )

    assert response.status_code == 201
    assert response.json() == {"message": "File stored", "filePath": None}
    assert len(_stored_files(settings)) == 1


def test_missing_old_image_is_best_effort(client, auth_header):
    response = client.put(
        "/post-image",
        headers=auth_header,
        files={"image": ("a.png", PNG, "image/png")},
        data={"oldPath": "images/already-gone.png"},
    )

    assert response.status_code == 201


def test_old_path_outside_upload_dir_is_left_alone(client, settings, auth_header):
    outside = settings.storage_root / "secret.txt"
    outside.write_text("keep me")

    response = client.put(
        "/post-image",
        headers=auth_header,
        files={"image": ("a.png", PNG, "image/png")},
        data={"oldPath": "images/../secret.txt"},
    )

    assert response.status_code == 201
    assert outside.read_text() == "keep me"


def test_oversized_upload_is_an_envelope(client, settings, auth_header):
    response = client.put(
        "/post-image",
        headers=auth_header,
        files={"image": ("big.png", b"x" * (settings.max_upload_bytes + 1), "image/png")},
    )

    assert response.status_code == 413
    body = response.json()
    assert body["status"] == 413
    assert "File too large" in body["message"]
    assert _stored_files(settings) == []


def test_stored_image_is_served(client, settings, auth_header):
    client.put(
        "/post-image",
        headers=auth_header,
        files={"image": ("served.png", PNG, "image/png")},
    )
    (name,) = _stored_files(settings)

    response = client.get(f"/images/{name}")

    assert response.status_code == 200
    assert response.content == PNG
